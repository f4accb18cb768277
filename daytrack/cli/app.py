"""Main CLI application for DayTrack."""

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel

from daytrack import __version__
from daytrack.cli.commands import ai, exercise, expense, habit, journal, stats
from daytrack.cli.ui.displays import format_mood
from daytrack.core.state import AppState
from daytrack.data.database import db
from daytrack.utils.config import config
from daytrack.utils.helpers import format_date, get_today

# Create main app
app = typer.Typer(
    name="daytrack",
    help="DayTrack - journal, workouts, habits and expenses in one place",
    no_args_is_help=False,
)

# Register sub-commands
app.add_typer(journal.app, name="journal", help="Journal entries")
app.add_typer(exercise.app, name="exercise", help="Workouts")
app.add_typer(habit.app, name="habit", help="Habits")
app.add_typer(expense.app, name="expense", help="Expenses")
app.add_typer(stats.app, name="stats", help="Statistics")
app.add_typer(ai.app, name="ai", help="AI-assisted journaling")

console = Console()


@app.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(f"DayTrack v{__version__}")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """DayTrack - track your day from a journal entry."""
    config.ensure_dirs()
    if ctx.invoked_subcommand is None:
        show_dashboard()


def show_dashboard() -> None:
    """Show today's summary."""
    state = AppState.load(db)
    today = format_date(get_today())

    console.print()
    console.print(Panel(f"[bold]DayTrack[/bold] - {today}", box=box.DOUBLE))

    entries_today = [e for e in state.entries if e.date == today]
    workouts_today = [e for e in state.exercises if e.date == today]
    spent_today = sum(e.amount for e in state.expenses if e.date == today)
    habits_done = len({c.habit_id for c in state.completions if c.date == today and c.completed})

    lines = [
        f"Journal: {len(entries_today)} entries today | streak {state.journal_stats.current_streak} days",
        f"Workouts: {len(workouts_today)} today | {sum(e.duration for e in workouts_today):g} min",
        f"Habits: {habits_done}/{len(state.habits)} done | {state.habit_stats.completion_rate}% this month",
        f"Spent: {spent_today:.2f} today | {state.expense_stats.total_amount:.2f} total",
    ]
    if entries_today:
        lines.append(f"Mood: {format_mood(entries_today[0].mood)}")

    console.print(Panel("\n".join(lines), title="Today", box=box.ROUNDED))
    console.print("\n[dim]Commands: journal, exercise, habit, expense, stats, ai[/dim]")
    console.print("[dim]Use --help with any command for more info.[/dim]")


if __name__ == "__main__":
    app()
