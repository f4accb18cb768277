"""Option parsing shared by the CLI commands."""

import typer
from rich.console import Console

from daytrack.utils.helpers import parse_day

console = Console()


def resolve_day(value: str | None) -> str:
    """Resolve a ``--date`` value, exiting with an error if it is invalid."""
    try:
        return parse_day(value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def split_tags(tags: str | None) -> list[str] | None:
    if not tags:
        return None
    return [t.strip() for t in tags.split(",") if t.strip()]


def given(**options) -> dict:
    """Options the user actually passed, for partial updates."""
    return {name: value for name, value in options.items() if value is not None}
