"""Rich display components for the CLI."""

from rich import box
from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from daytrack.core.entries import (
    ExerciseEntry,
    ExpenseEntry,
    HabitCompletion,
    HabitEntry,
    JournalEntry,
    MoodType,
)
from daytrack.core.extraction import ExtractionResult
from daytrack.core.session import CommitResult
from daytrack.core.stats import ExerciseStats, ExpenseStats, HabitStats, JournalStats
from daytrack.utils.helpers import format_timestamp

console = Console()


# Color mappings
MOOD_DISPLAY = {
    MoodType.HAPPY: (":)", "green"),
    MoodType.SAD: (":(", "blue"),
    MoodType.NEUTRAL: (":|", "white"),
    MoodType.ANXIOUS: (":S", "yellow"),
    MoodType.EXCITED: (":D", "bright_green"),
    MoodType.GRATEFUL: ("<3", "magenta"),
}


def _confidence_color(confidence: float) -> str:
    if confidence >= 0.8:
        return "green"
    if confidence >= 0.6:
        return "yellow"
    return "red"


def format_mood(mood: MoodType) -> str:
    icon, color = MOOD_DISPLAY.get(mood, (":|", "white"))
    return f"[{color}]{icon} {mood.value}[/{color}]"


def display_journal_list(entries: list[JournalEntry], title: str = "Journal Entries") -> None:
    """Display journal entries, newest date first."""
    if not entries:
        console.print(f"[dim]No {title.lower()} found.[/dim]")
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Date", width=10)
    table.add_column("Mood", width=12)
    table.add_column("Title / Content", min_width=20)

    for entry in sorted(entries, key=lambda e: (e.date, e.created_at), reverse=True):
        text = entry.title or entry.content
        if len(text) > 50:
            text = text[:47] + "..."
        table.add_row(entry.id, entry.date, format_mood(entry.mood), text)

    console.print(table)


def display_journal_entry(entry: JournalEntry) -> None:
    """Display a single journal entry."""
    content = f"""[dim]Date:[/dim] {entry.date}
[dim]Mood:[/dim] {format_mood(entry.mood)}
[dim]Created:[/dim] {format_timestamp(entry.created_at)}

{entry.content}"""

    if entry.tags:
        content += f"\n\n[dim]Tags:[/dim] {', '.join(entry.tags)}"

    console.print(Panel(content, title=entry.title or entry.id, box=box.ROUNDED))


def display_exercise_list(exercises: list[ExerciseEntry], title: str = "Exercises") -> None:
    """Display logged workouts."""
    if not exercises:
        console.print(f"[dim]No {title.lower()} found.[/dim]")
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Date", width=10)
    table.add_column("Type", width=9)
    table.add_column("Min", justify="right")
    table.add_column("Km", justify="right")
    table.add_column("Kcal", justify="right")

    for exercise in sorted(exercises, key=lambda e: (e.date, e.created_at), reverse=True):
        table.add_row(
            exercise.id,
            exercise.date,
            exercise.type.value,
            f"{exercise.duration:g}",
            f"{exercise.distance:g}" if exercise.distance is not None else "-",
            f"{exercise.calories:g}" if exercise.calories is not None else "-",
        )

    console.print(table)


def display_expense_list(expenses: list[ExpenseEntry], title: str = "Expenses") -> None:
    """Display expenses with a total row."""
    if not expenses:
        console.print(f"[dim]No {title.lower()} found.[/dim]")
        return

    table = Table(title=title, box=box.ROUNDED, show_footer=True)
    table.add_column("ID", style="dim", footer="")
    table.add_column("Date", width=10, footer="")
    table.add_column("Category", width=13, footer="Total")
    table.add_column(
        "Amount", justify="right", footer=f"{sum(e.amount for e in expenses):.2f}"
    )
    table.add_column("Description", min_width=12, footer="")

    for expense in sorted(expenses, key=lambda e: (e.date, e.created_at), reverse=True):
        table.add_row(
            expense.id,
            expense.date,
            expense.category.value,
            f"{expense.amount:.2f}",
            expense.description or "",
        )

    console.print(table)


def display_habit_list(
    habits: list[HabitEntry],
    completions: list[HabitCompletion],
    streaks: dict[str, int],
    day: str,
) -> None:
    """Display habits with their state on ``day`` and current streak."""
    if not habits:
        console.print("[dim]No habits found.[/dim]")
        return

    done = {c.habit_id for c in completions if c.date == day and c.completed}

    table = Table(title=f"Habits ({day})", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", min_width=15)
    table.add_column("Frequency", width=9)
    table.add_column("Done", width=5)
    table.add_column("Streak", justify="right")

    for habit in habits:
        table.add_row(
            habit.id,
            habit.name,
            habit.frequency.value,
            "[green]Yes[/green]" if habit.id in done else "[dim]No[/dim]",
            str(streaks.get(habit.id, 0)),
        )

    console.print(table)


def display_journal_stats(stats: JournalStats) -> None:
    content = f"""[bold]Journal[/bold]

Entries: {stats.total_entries}
Current streak: {stats.current_streak} days
Last entry: {stats.last_entry_date or '-'}"""

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Mood")
    table.add_column("Count", justify="right")
    for mood in MoodType:
        table.add_row(format_mood(mood), str(stats.mood_distribution.get(mood.value, 0)))

    console.print(Columns([Panel(content, box=box.ROUNDED), Panel(table, title="Moods", box=box.ROUNDED)]))


def display_exercise_stats(stats: ExerciseStats) -> None:
    content = f"""[bold]Exercise[/bold]

Workouts: {stats.total_workouts}
Duration: {stats.total_duration:g} min
Distance: {stats.total_distance:g} km
Calories: {stats.total_calories:g}
Per week: {stats.average_per_week:g}"""

    console.print(Panel(content, box=box.ROUNDED))


def display_habit_stats(stats: HabitStats, habits: list[HabitEntry]) -> None:
    content = f"""[bold]Habits[/bold]

Habits: {stats.total_habits}
Completion rate: {stats.completion_rate}%"""

    names = {h.id: h.name for h in habits}
    for habit_id, streak in stats.current_streaks.items():
        content += f"\n  {names.get(habit_id, habit_id)}: {streak} days"

    console.print(Panel(content, box=box.ROUNDED))


def display_expense_stats(stats: ExpenseStats) -> None:
    table = Table(title="Expenses", box=box.ROUNDED)
    table.add_column("Category", width=13)
    table.add_column("Count", justify="right")
    table.add_column("Total", justify="right")

    for category, count in stats.category_breakdown.items():
        table.add_row(category, str(count), f"{stats.category_totals.get(category, 0):.2f}")

    console.print(table)
    console.print(
        f"Total: {stats.total_amount:.2f} over {stats.total_expenses} expenses"
        f" | Per day: {stats.average_per_day:.2f}"
        f" | Last: {stats.last_expense_date or '-'}"
    )


def display_extraction_preview(extraction: ExtractionResult) -> None:
    """Display what an extraction would create, with item confidence."""
    if extraction.is_empty:
        console.print("[yellow]Nothing was extracted from this entry.[/yellow]")
        return

    table = Table(title="Extracted", box=box.ROUNDED)
    table.add_column("Kind", width=9)
    table.add_column("Details", min_width=30)
    table.add_column("Conf", justify="right")

    def conf(value: float) -> str:
        color = _confidence_color(value)
        return f"[{color}]{value:.0%}[/{color}]"

    for exercise in extraction.exercises:
        details = f"{exercise.type.value}, {exercise.duration} min"
        if exercise.distance is not None:
            details += f", {exercise.distance:g} km"
        table.add_row("exercise", details, conf(exercise.confidence))

    for habit in extraction.habits:
        state = "done" if habit.completed else "not done"
        table.add_row("habit", f"{habit.name} ({state})", conf(habit.confidence))

    for expense in extraction.expenses:
        details = f"{expense.category.value}, {expense.amount:.2f}"
        if expense.description:
            details += f" - {expense.description}"
        table.add_row("expense", details, conf(expense.confidence))

    for activity in extraction.activities:
        table.add_row(activity.type.value, activity.title, conf(activity.confidence))

    console.print(table)
    console.print(
        f"[dim]Model: {extraction.extraction_model} | {extraction.processing_time_ms} ms[/dim]"
    )


def display_commit_result(result: CommitResult) -> None:
    console.print(f"[green]Journal entry saved![/green] ID: {result.journal_entry.id}")
    console.print(
        f"  Exercises: {len(result.exercises)} | Habits: {len(result.habits)}"
        f" | Expenses: {len(result.expenses)}"
    )
