from __future__ import annotations

from ...core.constants import NOTE_LATE_CHECKIN, NOTE_SYSTEM_BACKFILL, NOTE_SYSTEM_CLOSED
from ...core.enums import AttendanceStatus
from ..clock import SessionWindow
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in; also the close-out outcome when an admin marks stragglers late."""

    def decide_checkin(self, *, window: SessionWindow, debug_mode: bool) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=NOTE_LATE_CHECKIN)

    def decide_close(self, *, backfill: bool) -> StatusDecision:
        note = NOTE_SYSTEM_BACKFILL if backfill else NOTE_SYSTEM_CLOSED
        return StatusDecision(status=AttendanceStatus.LATE, note=note)
