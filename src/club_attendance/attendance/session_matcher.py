"""Which configured session a stored record belongs to.

Records are matched by, in order: the session number carried by their
unique key, an exact label match against the current config, the
``session1``/``session2`` placeholder labels, and finally a tolerance window
around the configured start times.

The tolerance step is a best-effort bridge for historical records whose
label predates a config change. It is not a correctness guarantee: a label
that falls inside the tolerance of both sessions is ambiguous and is not
assigned to either.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core.constants import DEFAULT_LEGACY_TOLERANCE_MINUTES
from ..core.exceptions import ValidationError
from ..settings.model import AttendanceConfig
from .clock import SESSION_NUMBERS
from .model import AttendanceRecord, RecordKey

logger = logging.getLogger(__name__)


def normalize_label(value: str) -> Optional[str]:
    parsed = parse_hhmm(value)
    return format_hhmm(*parsed) if parsed else None


class SessionMatcher:
    def __init__(self, config: AttendanceConfig, *, tolerance_minutes: int = DEFAULT_LEGACY_TOLERANCE_MINUTES):
        self._config = config
        self._tolerance = int(tolerance_minutes)

    def by_label(self, label: str) -> Optional[int]:
        """Session number for an HH:MM label: exact match, else the tolerance rule."""

        normalized = normalize_label(label)
        if normalized is None:
            return None
        for n in SESSION_NUMBERS:
            if normalized == self._config.session_label(n):
                return n

        hour, minute = parse_hhmm(normalized)
        minutes = hour * 60 + minute
        candidates = [
            n
            for n in SESSION_NUMBERS
            if abs(minutes - self._config.session_start(n).minutes_of_day) <= self._tolerance
        ]
        if len(candidates) == 1:
            return candidates[0]
        if len(candidates) > 1:
            logger.warning("Session label %s is within tolerance of both sessions; leaving it unmatched", label)
        return None

    def session_of(self, record: AttendanceRecord) -> Optional[int]:
        if record.session_number in SESSION_NUMBERS:
            return record.session_number

        key = RecordKey.try_parse(record.unique_key)
        if key is not None:
            return key.session_number

        label = (record.session_time or "").strip()
        for n in SESSION_NUMBERS:
            if label == f"session{n}":
                return n
        return self.by_label(label)

    def filter(self, records: Iterable[AttendanceRecord], session_number: int) -> List[AttendanceRecord]:
        return [r for r in records if self.session_of(r) == session_number]


def resolve_session(
    config: AttendanceConfig,
    session_time: str,
    session_number: Optional[int] = None,
    *,
    tolerance_minutes: int = DEFAULT_LEGACY_TOLERANCE_MINUTES,
) -> tuple[int, str]:
    """Validate a batch request's session reference into (number, HH:MM label)."""

    label = normalize_label(session_time or "")
    if label is None:
        raise ValidationError("sessionTime must be HH:MM (e.g. 15:20)")

    if session_number is not None:
        if session_number not in SESSION_NUMBERS:
            raise ValidationError("sessionNumber must be 1 or 2")
        return session_number, label

    number = SessionMatcher(config, tolerance_minutes=tolerance_minutes).by_label(label)
    if number is None:
        raise ValidationError(
            f"sessionTime {label} does not match a configured session "
            f"({config.session_label(1)} or {config.session_label(2)}); pass sessionNumber explicitly"
        )
    return number, label
