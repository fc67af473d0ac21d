from __future__ import annotations

from ...core.constants import NOTE_DEBUG_CHECKIN
from ...core.enums import AttendanceStatus
from ..clock import SessionWindow
from .base import AttendanceStrategy, StatusDecision


class OnTimeStrategy(AttendanceStrategy):
    """Check-in inside the on-time window."""

    def decide_checkin(self, *, window: SessionWindow, debug_mode: bool) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, note=NOTE_DEBUG_CHECKIN if debug_mode else "")
