"""Attendance ledger: the only writer of `attendance_records`.

Every mutation goes through one of two store-level guarantees: an exclusive
create keyed by the deterministic record key, or a conditional
`pending -> terminal` transition. Admin overrides are the single exception
and bypass the transition rule explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Tuple

from ..core.constants import NOTE_PENDING
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedInError, DuplicateRecordError
from .model import AttendanceRecord, RecordKey
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    def __init__(self, records: AttendanceRepository):
        self._records = records

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        return self._records.get(key.serialize())

    def upsert_pending(
        self,
        key: RecordKey,
        *,
        student_name: str,
        student_email: str,
        session_time: str,
        now: datetime,
    ) -> Tuple[AttendanceRecord, bool]:
        """Return the record for `key`, creating it as pending if absent.

        The boolean is True only for the caller whose create won. Losing a
        create race is not an error: the winner's row is returned instead.
        """

        existing = self.get(key)
        if existing is not None:
            return existing, False

        record = AttendanceRecord.new(
            key,
            student_name=student_name,
            student_email=student_email,
            session_time=session_time,
            status=AttendanceStatus.PENDING,
            now=now,
            notes=NOTE_PENDING,
        )
        try:
            self._records.create(record)
        except DuplicateRecordError:
            existing = self.get(key)
            if existing is None:
                raise
            logger.debug("Pending create for %s lost the race", key)
            return existing, False
        return record, True

    def create(
        self,
        key: RecordKey,
        *,
        student_name: str,
        student_email: str,
        session_time: str,
        status: AttendanceStatus,
        now: datetime,
        notes: str = "",
    ) -> AttendanceRecord:
        """Exclusive create in any state; DuplicateRecordError if the key exists."""

        record = AttendanceRecord.new(
            key,
            student_name=student_name,
            student_email=student_email,
            session_time=session_time,
            status=status,
            now=now,
            notes=notes,
        )
        self._records.create(record)
        return record

    def transition(
        self,
        record: AttendanceRecord,
        *,
        status: AttendanceStatus,
        now: datetime,
        notes: str = "",
    ) -> AttendanceRecord:
        """pending -> `status`. Raises AlreadyCheckedInError if someone got there first."""

        if not self._records.transition_pending(record.unique_key, status=status, check_in_time=now, notes=notes):
            current = self._records.get(record.unique_key)
            current_status = current.status.value if current else None
            raise AlreadyCheckedInError.for_session(record.session_number, current_status)
        return replace(record, status=status, check_in_time=now, notes=notes)

    def try_close(
        self, record: AttendanceRecord, *, status: AttendanceStatus, now: datetime, notes: str
    ) -> bool:
        """Sweeper variant of `transition`: False instead of raising when no longer pending."""

        return self._records.transition_pending(record.unique_key, status=status, check_in_time=now, notes=notes)

    def overwrite(
        self,
        key: RecordKey,
        *,
        status: AttendanceStatus,
        now: datetime,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """Admin override from any state. None when the record does not exist."""

        if not self._records.overwrite_status(key.serialize(), status=status, check_in_time=now, notes=notes):
            return None
        return self.get(key)

    def list_for_week(self, week_number: int) -> List[AttendanceRecord]:
        return list(self._records.list_for_week(week_number))

    def list_recent(self, limit: int) -> List[AttendanceRecord]:
        return list(self._records.list_recent(limit))
