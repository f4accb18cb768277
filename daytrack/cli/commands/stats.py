"""Statistics CLI commands."""

import typer
from rich.console import Console

from daytrack.cli.ui.displays import (
    display_exercise_stats,
    display_expense_stats,
    display_habit_stats,
    display_journal_stats,
)
from daytrack.core.state import AppState
from daytrack.data.database import db

app = typer.Typer(help="Statistics commands")
console = Console()


@app.command("journal")
def journal_stats() -> None:
    """Show journal totals, streak and moods."""
    display_journal_stats(db.journal.calculate_stats())


@app.command("exercise")
def exercise_stats() -> None:
    """Show workout totals."""
    display_exercise_stats(db.exercises.calculate_stats())


@app.command("habits")
def habit_stats() -> None:
    """Show habit completion rate and streaks."""
    display_habit_stats(db.habits.calculate_stats(), db.habits.get_all())


@app.command("expenses")
def expense_stats() -> None:
    """Show spending by category."""
    display_expense_stats(db.expenses.calculate_stats())


@app.command("overview")
def show_overview() -> None:
    """Show every statistic at once."""
    state = AppState.load(db)

    display_journal_stats(state.journal_stats)
    display_exercise_stats(state.exercise_stats)
    display_habit_stats(state.habit_stats, state.habits)
    display_expense_stats(state.expense_stats)
