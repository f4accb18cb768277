"""Habit tracking CLI commands."""

import typer
from rich import box
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from daytrack.cli.options import given, resolve_day
from daytrack.cli.ui.displays import display_habit_list
from daytrack.core.entries import HabitEntryCreate, HabitEntryUpdate, HabitFrequency
from daytrack.core.streaks import compute_habit_streaks
from daytrack.data.database import db

app = typer.Typer(help="Habit tracking commands")
console = Console()


@app.command("add")
def add_habit(
    name: str = typer.Argument(..., help="Habit name"),
    description: str | None = typer.Option(None, "--desc", help="Habit description"),
    frequency: HabitFrequency = typer.Option(
        HabitFrequency.DAILY, "--frequency", "-f", help="How often"
    ),
) -> None:
    """Start tracking a habit."""
    habit = db.habits.create(
        HabitEntryCreate(name=name, description=description, frequency=frequency)
    )
    console.print(f"[green]Habit created![/green] ID: {habit.id}")


@app.command("list")
def list_habits(
    day: str | None = typer.Option(None, "--date", "-d", help="Show completion for this date"),
) -> None:
    """List habits with their completion state and streak."""
    habits = db.habits.get_all()
    completions = db.habits.get_all_completions()
    display_habit_list(habits, completions, compute_habit_streaks(habits, completions), resolve_day(day))


@app.command("done")
def toggle_habit(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    day: str | None = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, today, yesterday)"),
    notes: str | None = typer.Option(None, "--notes", "-n", help="Notes for this day"),
) -> None:
    """Toggle a habit's completion for a day (today by default)."""
    habit = db.habits.get_by_id(habit_id)
    if not habit:
        console.print(f"[red]Habit {habit_id} not found.[/red]")
        raise typer.Exit(1)

    completion = db.habits.toggle_completion(habit_id, resolve_day(day), notes)
    if completion.completed:
        console.print(f"[green]{habit.name} done for {completion.date}![/green]")
        streak = compute_habit_streaks([habit], db.habits.get_completions_by_habit(habit_id))[habit_id]
        if streak > 1:
            console.print(f"[yellow]Streak: {streak} days[/yellow]")
    else:
        console.print(f"[yellow]{habit.name} marked not done for {completion.date}.[/yellow]")


@app.command("history")
def habit_history(habit_id: str = typer.Argument(..., help="Habit ID")) -> None:
    """Show every recorded day for a habit."""
    habit = db.habits.get_by_id(habit_id)
    if not habit:
        console.print(f"[red]Habit {habit_id} not found.[/red]")
        raise typer.Exit(1)

    completions = sorted(db.habits.get_completions_by_habit(habit_id), key=lambda c: c.date, reverse=True)
    if not completions:
        console.print(f"[dim]No history for {habit.name}.[/dim]")
        return

    table = Table(title=habit.name, box=box.SIMPLE)
    table.add_column("Date", width=10)
    table.add_column("Done", width=5)
    table.add_column("Notes")
    for completion in completions:
        table.add_row(
            completion.date,
            "[green]Yes[/green]" if completion.completed else "[dim]No[/dim]",
            completion.notes or "",
        )
    console.print(table)


@app.command("edit")
def edit_habit(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    name: str | None = typer.Option(None, "--name"),
    description: str | None = typer.Option(None, "--desc"),
    frequency: HabitFrequency | None = typer.Option(None, "--frequency", "-f"),
) -> None:
    """Edit a habit."""
    updates = HabitEntryUpdate(**given(name=name, description=description, frequency=frequency))
    if db.habits.update(habit_id, updates) is None:
        console.print(f"[red]Habit {habit_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Habit {habit_id} updated.[/green]")


@app.command("delete")
def delete_habit(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    force: bool = typer.Option(False, "--force", help="Skip confirmation"),
) -> None:
    """Delete a habit and all of its completions."""
    habit = db.habits.get_by_id(habit_id)
    if not habit:
        console.print(f"[red]Habit {habit_id} not found.[/red]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Delete habit '{habit.name}' and its history?"):
            raise typer.Exit(0)

    db.habits.delete(habit_id)
    console.print(f"[green]Habit {habit_id} deleted.[/green]")
