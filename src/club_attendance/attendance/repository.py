from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, unique_key: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> None:
        """Exclusive create; raises DuplicateRecordError when the key exists."""

        raise NotImplementedError

    def transition_pending(
        self,
        unique_key: str,
        *,
        status: AttendanceStatus,
        check_in_time: datetime,
        notes: str,
    ) -> bool:
        """Move a record out of `pending` iff it is still pending. Atomic."""

        raise NotImplementedError

    def overwrite_status(
        self,
        unique_key: str,
        *,
        status: AttendanceStatus,
        check_in_time: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        """Admin-only override; `notes=None` keeps the stored notes. False if missing."""

        raise NotImplementedError

    def list_for_week(self, week_number: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
