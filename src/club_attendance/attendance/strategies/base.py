from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import AttendanceStatus
from ...core.exceptions import ValidationError
from ..clock import SessionWindow


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: str = ""


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status.

    `decide_checkin` covers a student checking in through an open window;
    `decide_close` covers the sweeper resolving a record once the window
    has closed (`backfill=True` when no record existed at all).
    """

    @abstractmethod
    def decide_checkin(self, *, window: SessionWindow, debug_mode: bool) -> StatusDecision:
        raise NotImplementedError

    def decide_close(self, *, backfill: bool) -> StatusDecision:
        raise ValidationError(f"{type(self).__name__} cannot close out a session")
