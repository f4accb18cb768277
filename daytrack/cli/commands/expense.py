"""Expense CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm

from daytrack.cli.options import given, resolve_day
from daytrack.cli.ui.displays import display_expense_list
from daytrack.core.entries import ExpenseCategory, ExpenseEntryCreate, ExpenseEntryUpdate
from daytrack.data.database import db

app = typer.Typer(help="Expense commands")
console = Console()


@app.command("add")
def add_expense(
    amount: float = typer.Argument(..., min=0, help="Amount spent"),
    category: ExpenseCategory = typer.Option(
        ExpenseCategory.OTHER, "--category", "-c", help="Spending category"
    ),
    description: str | None = typer.Option(None, "--desc", help="What it was for"),
    day: str | None = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, today, yesterday)"),
) -> None:
    """Record an expense."""
    expense = db.expenses.create(
        ExpenseEntryCreate(
            date=resolve_day(day), category=category, amount=amount, description=description
        )
    )
    console.print(
        f"[green]Recorded {expense.amount:.2f} ({expense.category.value})[/green] ID: {expense.id}"
    )


@app.command("list")
def list_expenses(
    day: str | None = typer.Option(None, "--date", "-d", help="Only expenses on this date"),
    category: ExpenseCategory | None = typer.Option(
        None, "--category", "-c", help="Filter by category"
    ),
) -> None:
    """List expenses."""
    if category:
        expenses = db.expenses.get_by_category(category)
        title = f"Expenses ({category.value})"
    else:
        expenses = db.expenses.get_all()
        title = "Expenses"

    if day:
        resolved = resolve_day(day)
        expenses = [e for e in expenses if e.date == resolved]

    display_expense_list(expenses, title)


@app.command("edit")
def edit_expense(
    expense_id: str = typer.Argument(..., help="Expense ID"),
    amount: float | None = typer.Option(None, "--amount", "-a", min=0),
    category: ExpenseCategory | None = typer.Option(None, "--category", "-c"),
    description: str | None = typer.Option(None, "--desc"),
    day: str | None = typer.Option(None, "--date", "-d"),
) -> None:
    """Edit an expense."""
    updates = ExpenseEntryUpdate(
        **given(
            amount=amount,
            category=category,
            description=description,
            date=resolve_day(day) if day else None,
        )
    )
    if db.expenses.update(expense_id, updates) is None:
        console.print(f"[red]Expense {expense_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Expense {expense_id} updated.[/green]")


@app.command("delete")
def delete_expense(
    expense_id: str = typer.Argument(..., help="Expense ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete an expense."""
    expense = db.expenses.get_by_id(expense_id)
    if not expense:
        console.print(f"[red]Expense {expense_id} not found.[/red]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Delete {expense.amount:.2f} on {expense.date}?"):
            raise typer.Exit(0)

    db.expenses.delete(expense_id)
    console.print(f"[green]Expense {expense_id} deleted.[/green]")
