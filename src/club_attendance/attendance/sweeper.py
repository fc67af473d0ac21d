from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LEGACY_TOLERANCE_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..core.logging_utils import log_business_event
from ..roster.repository import RosterProvider
from ..settings.service import SettingsService
from .factory import AttendanceStrategyFactory
from .ledger import AttendanceLedger
from .model import RecordKey
from .session_matcher import SessionMatcher, resolve_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepSummary:
    session_number: int
    session_time: str
    week_number: int
    marked_as: str
    total_students: int
    updated_count: int
    created_count: int
    failed_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionNumber": self.session_number,
            "sessionTime": self.session_time,
            "weekNumber": self.week_number,
            "markedAs": self.marked_as,
            "totalStudents": self.total_students,
            "updated": self.updated_count,
            "created": self.created_count,
            "failed": self.failed_count,
        }


class Sweeper:
    """Closes out a session: every pending record and every missing student
    ends up in the `mark_as` state. Running it twice changes nothing."""

    def __init__(
        self,
        ledger: AttendanceLedger,
        roster: RosterProvider,
        settings: SettingsService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        tolerance_minutes: int = DEFAULT_LEGACY_TOLERANCE_MINUTES,
    ):
        self._ledger = ledger
        self._roster = roster
        self._settings = settings
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._tolerance = int(tolerance_minutes)

    def sweep(
        self,
        *,
        session_time: str,
        week_number: int,
        mark_as: str = AttendanceStatus.ABSENT.value,
        session_number: Optional[int] = None,
        now: datetime | None = None,
    ) -> SweepSummary:
        now = now or now_local()
        strategy = self._factory.for_close(mark_as=mark_as)
        config, _ = self._settings.get_config()
        number, label = resolve_session(config, session_time, session_number, tolerance_minutes=self._tolerance)

        matcher = SessionMatcher(config, tolerance_minutes=self._tolerance)
        records = matcher.filter(self._ledger.list_for_week(week_number), number)
        students = self._roster.list_active_students()

        updated = created = failed = 0

        close = strategy.decide_close(backfill=False)
        for record in records:
            if record.status is not AttendanceStatus.PENDING:
                continue
            try:
                if self._ledger.try_close(record, status=close.status, now=now, notes=close.note):
                    updated += 1
            except Exception:
                logger.warning("Could not close record %s", record.unique_key, exc_info=True)
                failed += 1

        backfill = strategy.decide_close(backfill=True)
        have_record = {r.student_id for r in records}
        for student in students:
            if student.student_id in have_record:
                continue
            key = RecordKey(student.student_id, number, week_number)
            try:
                self._ledger.create(
                    key,
                    student_name=student.name,
                    student_email=student.email,
                    session_time=label,
                    status=backfill.status,
                    now=now,
                    notes=backfill.note,
                )
                created += 1
            except DuplicateRecordError:
                # Appeared since we listed (or was hidden as ambiguous): close it if still pending.
                existing = self._ledger.get(key)
                if existing is not None and self._ledger.try_close(
                    existing, status=close.status, now=now, notes=close.note
                ):
                    updated += 1
            except Exception:
                logger.warning("Could not backfill record %s", key, exc_info=True)
                failed += 1

        summary = SweepSummary(
            session_number=number,
            session_time=label,
            week_number=week_number,
            marked_as=close.status.value,
            total_students=len(students),
            updated_count=updated,
            created_count=created,
            failed_count=failed,
        )
        log_business_event("session_swept", "session", f"{number}_{week_number}", summary.to_dict())
        return summary
