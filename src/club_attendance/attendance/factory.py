from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .clock import SessionWindow
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, window: SessionWindow) -> AttendanceStrategy:
        if window.minutes_remaining > 0:
            return OnTimeStrategy()
        return LateStrategy()

    def for_close(self, *, mark_as: Union[str, AttendanceStatus]) -> AttendanceStrategy:
        try:
            status = AttendanceStatus(mark_as)
        except ValueError:
            status = None
        if status is AttendanceStatus.ABSENT:
            return AbsentStrategy()
        if status is AttendanceStatus.LATE:
            return LateStrategy()
        raise ValidationError("markAs must be 'absent' or 'late'")
