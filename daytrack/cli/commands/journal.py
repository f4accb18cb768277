"""Journal CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm

from daytrack.cli.options import given, resolve_day, split_tags
from daytrack.cli.ui.displays import display_journal_entry, display_journal_list
from daytrack.core.entries import JournalEntryCreate, JournalEntryUpdate, MoodType
from daytrack.data.database import db

app = typer.Typer(help="Journal commands")
console = Console()


@app.command("add")
def add_entry(
    content: str = typer.Argument(..., help="What happened today"),
    mood: MoodType = typer.Option(MoodType.NEUTRAL, "--mood", "-m", help="Mood for the day"),
    title: str | None = typer.Option(None, "--title", "-t", help="Entry title"),
    tags: str | None = typer.Option(None, "--tags", help="Comma-separated tags"),
    day: str | None = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, today, yesterday)"),
) -> None:
    """Write a journal entry."""
    entry = db.journal.create(
        JournalEntryCreate(
            date=resolve_day(day), mood=mood, title=title, content=content, tags=split_tags(tags)
        )
    )
    console.print(f"[green]Journal entry saved![/green] ID: {entry.id}")

    stats = db.journal.calculate_stats()
    if stats.current_streak > 1:
        console.print(f"[yellow]Journaling streak: {stats.current_streak} days[/yellow]")


@app.command("list")
def list_entries(
    day: str | None = typer.Option(None, "--date", "-d", help="Only entries for this date"),
    mood: MoodType | None = typer.Option(None, "--mood", "-m", help="Filter by mood"),
) -> None:
    """List journal entries."""
    if day:
        resolved = resolve_day(day)
        entries = db.journal.get_by_date(resolved)
        title = f"Journal Entries ({resolved})"
    else:
        entries = db.journal.get_all()
        title = "Journal Entries"

    if mood:
        entries = [e for e in entries if e.mood == mood]

    display_journal_list(entries, title)


@app.command("show")
def show_entry(entry_id: str = typer.Argument(..., help="Entry ID")) -> None:
    """Show a journal entry."""
    entry = db.journal.get_by_id(entry_id)
    if not entry:
        console.print(f"[red]Entry {entry_id} not found.[/red]")
        raise typer.Exit(1)

    display_journal_entry(entry)


@app.command("edit")
def edit_entry(
    entry_id: str = typer.Argument(..., help="Entry ID"),
    content: str | None = typer.Option(None, "--content", "-c", help="New content"),
    mood: MoodType | None = typer.Option(None, "--mood", "-m"),
    title: str | None = typer.Option(None, "--title", "-t"),
    tags: str | None = typer.Option(None, "--tags"),
    day: str | None = typer.Option(None, "--date", "-d"),
) -> None:
    """Edit a journal entry."""
    updates = JournalEntryUpdate(
        **given(
            content=content,
            mood=mood,
            title=title,
            tags=split_tags(tags),
            date=resolve_day(day) if day else None,
        )
    )
    if db.journal.update(entry_id, updates) is None:
        console.print(f"[red]Entry {entry_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Entry {entry_id} updated.[/green]")


@app.command("delete")
def delete_entry(
    entry_id: str = typer.Argument(..., help="Entry ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a journal entry."""
    entry = db.journal.get_by_id(entry_id)
    if not entry:
        console.print(f"[red]Entry {entry_id} not found.[/red]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Delete entry from {entry.date}?"):
            raise typer.Exit(0)

    db.journal.delete(entry_id)
    console.print(f"[green]Entry {entry_id} deleted.[/green]")
