from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LEGACY_TOLERANCE_MINUTES
from ..core.logging_utils import log_business_event
from ..roster.repository import RosterProvider
from ..settings.service import SettingsService
from .ledger import AttendanceLedger
from .model import RecordKey
from .session_matcher import SessionMatcher, resolve_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitializeSummary:
    session_number: int
    session_time: str
    week_number: int
    session_duration: int
    total_students: int
    existing_records_count: int
    new_records_count: int
    failed_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionNumber": self.session_number,
            "sessionTime": self.session_time,
            "weekNumber": self.week_number,
            "sessionDuration": self.session_duration,
            "totalStudents": self.total_students,
            "existingRecordsCount": self.existing_records_count,
            "newRecordsCount": self.new_records_count,
            "failedCount": self.failed_count,
        }


class SessionInitializer:
    """Pre-creates a `pending` record for every roster student of one session."""

    def __init__(
        self,
        ledger: AttendanceLedger,
        roster: RosterProvider,
        settings: SettingsService,
        *,
        tolerance_minutes: int = DEFAULT_LEGACY_TOLERANCE_MINUTES,
    ):
        self._ledger = ledger
        self._roster = roster
        self._settings = settings
        self._tolerance = int(tolerance_minutes)

    def initialize(
        self,
        *,
        session_time: str,
        week_number: int,
        session_number: Optional[int] = None,
        session_duration: Optional[int] = None,
        now: datetime | None = None,
    ) -> InitializeSummary:
        now = now or now_local()
        config, _ = self._settings.get_config()
        number, label = resolve_session(config, session_time, session_number, tolerance_minutes=self._tolerance)

        students = self._roster.list_active_students()
        matcher = SessionMatcher(config, tolerance_minutes=self._tolerance)
        existing = matcher.filter(self._ledger.list_for_week(week_number), number)
        have_record = {r.student_id for r in existing}

        created = failed = 0
        for student in students:
            if student.student_id in have_record:
                continue
            try:
                _, was_created = self._ledger.upsert_pending(
                    RecordKey(student.student_id, number, week_number),
                    student_name=student.name,
                    student_email=student.email,
                    session_time=label,
                    now=now,
                )
            except Exception:
                logger.warning("Could not create pending record for %s", student.student_id, exc_info=True)
                failed += 1
                continue
            if was_created:
                created += 1

        summary = InitializeSummary(
            session_number=number,
            session_time=label,
            week_number=week_number,
            session_duration=session_duration or config.session_duration(number),
            total_students=len(students),
            existing_records_count=len(existing),
            new_records_count=created,
            failed_count=failed,
        )
        log_business_event("session_initialized", "session", f"{number}_{week_number}", summary.to_dict())
        return summary
