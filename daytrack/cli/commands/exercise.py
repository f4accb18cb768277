"""Exercise CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm

from daytrack.cli.options import given, resolve_day
from daytrack.cli.ui.displays import display_exercise_list
from daytrack.core.entries import ExerciseEntryCreate, ExerciseEntryUpdate, ExerciseType
from daytrack.data.database import db

app = typer.Typer(help="Exercise commands")
console = Console()


@app.command("add")
def add_exercise(
    exercise_type: ExerciseType = typer.Argument(..., help="Type of exercise"),
    duration: float = typer.Option(..., "--duration", "-t", min=0, help="Duration in minutes"),
    distance: float | None = typer.Option(None, "--distance", "-k", min=0, help="Distance in km"),
    calories: float | None = typer.Option(None, "--calories", "-c", min=0, help="Calories burned"),
    notes: str | None = typer.Option(None, "--notes", "-n", help="Notes"),
    day: str | None = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, today, yesterday)"),
) -> None:
    """Log a workout."""
    exercise = db.exercises.create(
        ExerciseEntryCreate(
            date=resolve_day(day),
            type=exercise_type,
            duration=duration,
            distance=distance,
            calories=calories,
            notes=notes,
        )
    )
    console.print(
        f"[green]Logged {exercise.type.value}: {exercise.duration:g} minutes[/green] ID: {exercise.id}"
    )


@app.command("list")
def list_exercises(
    day: str | None = typer.Option(None, "--date", "-d", help="Only workouts on this date"),
    exercise_type: ExerciseType | None = typer.Option(None, "--type", help="Filter by type"),
) -> None:
    """List logged workouts."""
    if exercise_type:
        exercises = db.exercises.get_by_type(exercise_type)
        title = f"Exercises ({exercise_type.value})"
    else:
        exercises = db.exercises.get_all()
        title = "Exercises"

    if day:
        resolved = resolve_day(day)
        exercises = [e for e in exercises if e.date == resolved]

    display_exercise_list(exercises, title)


@app.command("edit")
def edit_exercise(
    exercise_id: str = typer.Argument(..., help="Exercise ID"),
    exercise_type: ExerciseType | None = typer.Option(None, "--type"),
    duration: float | None = typer.Option(None, "--duration", "-t", min=0),
    distance: float | None = typer.Option(None, "--distance", "-k", min=0),
    calories: float | None = typer.Option(None, "--calories", "-c", min=0),
    notes: str | None = typer.Option(None, "--notes", "-n"),
    day: str | None = typer.Option(None, "--date", "-d"),
) -> None:
    """Edit a logged workout."""
    updates = ExerciseEntryUpdate(
        **given(
            type=exercise_type,
            duration=duration,
            distance=distance,
            calories=calories,
            notes=notes,
            date=resolve_day(day) if day else None,
        )
    )
    if db.exercises.update(exercise_id, updates) is None:
        console.print(f"[red]Exercise {exercise_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Exercise {exercise_id} updated.[/green]")


@app.command("delete")
def delete_exercise(
    exercise_id: str = typer.Argument(..., help="Exercise ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a logged workout."""
    exercise = db.exercises.get_by_id(exercise_id)
    if not exercise:
        console.print(f"[red]Exercise {exercise_id} not found.[/red]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Delete {exercise.type.value} on {exercise.date}?"):
            raise typer.Exit(0)

    db.exercises.delete(exercise_id)
    console.print(f"[green]Exercise {exercise_id} deleted.[/green]")
