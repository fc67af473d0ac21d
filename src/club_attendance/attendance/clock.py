"""Session clock: pure functions of (config, now).

Boundary rule used everywhere: the on-time window is ``[start, start+d)``,
the late window is ``[start+d, start+2d)`` and the session is closed from
``start+2d``. ``minutes_remaining`` counts whole minutes (rounded up) until
the end of the on-time window, so a check-in is on time iff it is > 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import js_weekday
from ..settings.model import AttendanceConfig

SESSION_NUMBERS = (1, 2)


@dataclass(frozen=True)
class SessionWindow:
    session_number: int
    session_time: str
    minutes_remaining: int

    @property
    def is_late(self) -> bool:
        return self.minutes_remaining <= 0

    def to_dict(self) -> dict:
        return {
            "sessionNumber": self.session_number,
            "sessionTime": self.session_time,
            "minutesRemaining": self.minutes_remaining,
            "isLate": self.is_late,
        }


def window_bounds(config: AttendanceConfig, session_number: int, day: date) -> tuple[datetime, datetime, datetime]:
    """(start, end of on-time window, end of late window) for one session on `day`."""

    start_at = config.session_start(session_number)
    start = datetime.combine(day, datetime.min.time()).replace(hour=start_at.hour, minute=start_at.minute)
    duration = timedelta(minutes=config.session_duration(session_number))
    return start, start + duration, start + 2 * duration


def minutes_until(end: datetime, now: datetime) -> int:
    return math.ceil((end - now).total_seconds() / 60)


def current_session(
    config: AttendanceConfig, now: datetime, debug_mode: Optional[bool] = None
) -> Optional[SessionWindow]:
    """The open session at `now`, or None when check-in is closed.

    In debug mode every moment maps to session 1 with its full duration left.
    When session windows overlap, an on-time match wins over a late one.
    """

    debug = config.debug_mode if debug_mode is None else debug_mode
    if debug:
        return SessionWindow(1, config.session_label(1), config.session1_duration)

    if js_weekday(now.date()) != config.day_of_week:
        return None

    late_match: Optional[SessionWindow] = None
    for n in SESSION_NUMBERS:
        start, on_time_end, late_end = window_bounds(config, n, now.date())
        if not (start <= now < late_end):
            continue
        window = SessionWindow(n, config.session_label(n), minutes_until(on_time_end, now))
        if not window.is_late:
            return window
        late_match = late_match or window
    return late_match


def week_number(config: AttendanceConfig, now: datetime) -> int:
    """Whole weeks since `week_start_date`, plus one; never below 1."""

    days = (now.date() - config.week_start_date).days
    return max(1, days // 7 + 1)
