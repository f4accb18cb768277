"""Helper utilities for DayTrack."""

import random
import string
import time
from datetime import date, datetime, timedelta

_ID_ALPHABET = string.digits + string.ascii_lowercase


def get_today() -> date:
    """Get today's date."""
    return date.today()


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_id(prefix: str) -> str:
    """Generate a record id such as ``entry_1705276800000_k3j9x0a1b``.

    The id combines the creation timestamp with nine random base36
    characters, so ids stay roughly ordered by creation time.
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{now_ms()}_{suffix}"


def parse_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string into a calendar date.

    Raises:
        ValueError: If the string is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def is_valid_date(value: str) -> bool:
    """Check whether a string is a ``YYYY-MM-DD`` calendar date."""
    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_day(value: str | None) -> str:
    """Resolve a CLI day argument (``today``, ``yesterday`` or YYYY-MM-DD).

    Raises:
        ValueError: If the value is none of these.
    """
    if value is None or value.lower() == "today":
        return format_date(get_today())
    if value.lower() == "yesterday":
        return format_date(get_today() - timedelta(days=1))
    if not is_valid_date(value):
        raise ValueError(f"Invalid date: {value} (use YYYY-MM-DD, today or yesterday)")
    return value


def format_date(d: date) -> str:
    """Format date for display and storage."""
    return d.strftime("%Y-%m-%d")


def format_timestamp(ms: int) -> str:
    """Format an epoch-millisecond timestamp for display."""
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")
