from __future__ import annotations

import re
from datetime import date, datetime

_HHMM = re.compile(r"^(\d{1,2})[:\-](\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> tuple[int, int] | None:
    """Parse "15:20", "9:05" or the legacy "15-20" into (hour, minute)."""
    match = _HHMM.match((value or "").strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def format_hhmm(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def js_weekday(value: date) -> int:
    """Weekday with 0=Sunday ... 6=Saturday, the convention stored in config."""
    return (value.weekday() + 1) % 7


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
