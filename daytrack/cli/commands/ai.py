"""AI journaling CLI commands."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from daytrack.cli.options import resolve_day
from daytrack.cli.ui.displays import (
    display_commit_result,
    display_extraction_preview,
    format_mood,
)
from daytrack.core.entries import MoodType
from daytrack.core.session import ExtractionSession
from daytrack.data.database import db
from daytrack.data.llm import llm
from daytrack.utils.exceptions import DayTrackError, ExtractionFailure

app = typer.Typer(help="AI-assisted journaling")
console = Console()


def _read_text(text: str | None, file: Path | None) -> str:
    if file is not None:
        try:
            text = file.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Could not read {file}: {e.strerror}[/red]")
            raise typer.Exit(1)
    if not text or not text.strip():
        console.print("[red]Journal text is empty.[/red]")
        raise typer.Exit(1)
    return text


@app.command("extract")
def extract_entry(
    text: str | None = typer.Argument(None, help="Journal text"),
    file: Path | None = typer.Option(None, "--file", help="Read journal text from a file"),
    mood: MoodType | None = typer.Option(None, "--mood", "-m", help="Mood for the entry"),
    title: str | None = typer.Option(None, "--title", "-t", help="Entry title"),
    day: str | None = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, today, yesterday)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Save without asking"),
) -> None:
    """Extract workouts, habits and expenses from a journal entry and save them."""
    journal_text = _read_text(text, file)
    resolved = resolve_day(day)
    session = ExtractionSession(llm, db)

    console.print("[dim]Analyzing journal entry...[/dim]")
    try:
        extraction = asyncio.run(
            session.extract(journal_text, resolved, mood.value if mood else None)
        )
    except ExtractionFailure as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    display_extraction_preview(extraction)

    if not yes:
        if not Confirm.ask("Save this entry and the extracted records?"):
            session.reset()
            console.print("[dim]Discarded.[/dim]")
            raise typer.Exit(0)

    try:
        result = session.confirm(mood=mood, title=title)
    except DayTrackError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    display_commit_result(result)


@app.command("mood")
def detect_mood(text: str = typer.Argument(..., help="Journal text")) -> None:
    """Detect the primary mood of a piece of text."""
    mood = asyncio.run(llm.extract_mood(text))
    if mood is None:
        console.print("[yellow]Could not detect a mood.[/yellow]")
        raise typer.Exit(1)

    console.print(f"Mood: {format_mood(mood)}")
