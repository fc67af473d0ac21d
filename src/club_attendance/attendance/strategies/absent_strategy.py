from __future__ import annotations

from ...core.constants import NOTE_SYSTEM_BACKFILL, NOTE_SYSTEM_CLOSED
from ...core.enums import AttendanceStatus
from ...core.exceptions import ValidationError
from ..clock import SessionWindow
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Window closed without a check-in."""

    def decide_checkin(self, *, window: SessionWindow, debug_mode: bool) -> StatusDecision:
        raise ValidationError("A check-in cannot be marked absent")

    def decide_close(self, *, backfill: bool) -> StatusDecision:
        note = NOTE_SYSTEM_BACKFILL if backfill else NOTE_SYSTEM_CLOSED
        return StatusDecision(status=AttendanceStatus.ABSENT, note=note)
