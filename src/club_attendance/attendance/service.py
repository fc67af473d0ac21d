from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ..common.datetime_utils import now_local
from ..common.validators import require_int, require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AttendanceClosedError,
    DuplicateRecordError,
    ValidationError,
)
from ..core.logging_utils import log_business_event
from ..roster.repository import RosterProvider
from ..settings.service import SettingsService, describe_schedule
from .clock import current_session, week_number
from .factory import AttendanceStrategyFactory
from .ledger import AttendanceLedger
from .model import AttendanceRecord, RecordKey
from .session_matcher import normalize_label

logger = logging.getLogger(__name__)


def parse_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"status must be one of: {allowed}") from None


class AttendanceService:
    def __init__(
        self,
        ledger: AttendanceLedger,
        settings: SettingsService,
        roster: RosterProvider,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._ledger = ledger
        self._settings = settings
        self._roster = roster
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def status(self, *, now: datetime | None = None, include_code: bool = False) -> Dict[str, Any]:
        now = now or now_local()
        settings = self._settings.load(now=now)
        config = settings.config
        window = current_session(config, now)

        if window is None:
            message = f"Attendance is closed now. {describe_schedule(config)}"
        elif window.is_late:
            message = f"Session {window.session_number} ({window.session_time}) is open; check-ins now count as late"
        else:
            message = (
                f"Session {window.session_number} ({window.session_time}) is open; "
                f"{window.minutes_remaining} min left to check in on time"
            )

        payload: Dict[str, Any] = {
            "isAttendanceOpen": window is not None,
            "session": window.to_dict() if window else None,
            "message": message,
            "weekNumber": week_number(config, now),
            "debugMode": config.debug_mode,
            "codeEnabled": settings.code_enabled,
            "hasCode": settings.has_live_code(now, self._settings.code_ttl_minutes),
            "config": config.to_dict(),
            "scheduleDescription": describe_schedule(config),
        }
        if include_code:
            expires_at = settings.code_expires_at(self._settings.code_ttl_minutes)
            payload.update(
                {
                    "verificationCode": settings.verification_code,
                    "codeCreatedAt": settings.code_created_at.isoformat() if settings.code_created_at else None,
                    "codeExpiresAt": expires_at.isoformat() if expires_at else None,
                    "serverTime": now.isoformat(),
                }
            )
        return payload

    def check_in(
        self,
        *,
        student_id: str,
        student_name: str,
        student_email: str,
        verification_code: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        student_id = require_non_empty(student_id, "studentId")
        student_name = require_non_empty(student_name, "studentName")
        student_email = require_non_empty(student_email, "studentEmail")

        now = now or now_local()
        settings = self._settings.load(now=now)
        config = settings.config

        window = current_session(config, now)
        if window is None:
            raise AttendanceClosedError(f"Attendance is closed now. {describe_schedule(config)}")

        self._settings.verify_code(settings, verification_code, now=now)

        key = RecordKey(student_id, window.session_number, week_number(config, now))
        strategy = self._factory.for_checkin(window=window)
        decision = strategy.decide_checkin(window=window, debug_mode=config.debug_mode)

        record, _ = self._ledger.upsert_pending(
            key,
            student_name=student_name,
            student_email=student_email,
            session_time=window.session_time,
            now=now,
        )
        if record.status.is_terminal:
            raise AlreadyCheckedInError.for_session(key.session_number, record.status.value)

        updated = self._ledger.transition(record, status=decision.status, now=now, notes=decision.note)
        log_business_event(
            "checked_in",
            "attendance",
            updated.unique_key,
            {"status": updated.status.value, "minutesRemaining": window.minutes_remaining},
        )
        return updated

    def set_status(
        self,
        record_key: str,
        status: Any,
        *,
        notes: Optional[str] = None,
        student_name: Optional[str] = None,
        student_email: Optional[str] = None,
        now: datetime | None = None,
    ) -> Tuple[AttendanceRecord, bool]:
        """Admin override of any record, creating it when it does not exist yet.

        Returns (record, created).
        """

        key = RecordKey.parse(record_key)
        new_status = parse_status(status)
        now = now or now_local()

        updated = self._ledger.overwrite(key, status=new_status, now=now, notes=notes)
        if updated is not None:
            log_business_event("status_overridden", "attendance", updated.unique_key, {"status": new_status.value})
            return updated, False

        name, email = self._student_identity(key.student_id, student_name, student_email)
        config, _ = self._settings.get_config()
        try:
            record = self._ledger.create(
                key,
                student_name=name,
                student_email=email,
                session_time=config.session_label(key.session_number),
                status=new_status,
                now=now,
                notes=notes or "",
            )
        except DuplicateRecordError:
            # Created between the overwrite attempt and our create.
            updated = self._ledger.overwrite(key, status=new_status, now=now, notes=notes)
            if updated is None:
                raise
            return updated, False

        log_business_event("status_overridden", "attendance", record.unique_key, {"status": new_status.value, "created": True})
        return record, True

    def create_record(self, payload: Dict[str, Any], *, now: datetime | None = None) -> AttendanceRecord:
        """Admin creation of a single record in any state."""

        now = now or now_local()
        config, _ = self._settings.get_config()

        student_id = require_non_empty(payload.get("studentId"), "studentId")
        session_number = require_int(payload.get("sessionNumber", 1), "sessionNumber", minimum=1, maximum=2)
        week = payload.get("weekNumber")
        week = week_number(config, now) if week in (None, "") else require_int(week, "weekNumber", minimum=1)
        new_status = parse_status(payload.get("status", AttendanceStatus.PRESENT.value))

        session_time = config.session_label(session_number)
        if payload.get("sessionTime"):
            session_time = normalize_label(str(payload["sessionTime"])) or session_time

        name, email = self._student_identity(student_id, payload.get("studentName"), payload.get("studentEmail"))
        record = self._ledger.create(
            RecordKey(student_id, session_number, week),
            student_name=name,
            student_email=email,
            session_time=session_time,
            status=new_status,
            now=now,
            notes=str(payload.get("notes") or ""),
        )
        log_business_event("record_created", "attendance", record.unique_key, {"status": new_status.value})
        return record

    def _student_identity(
        self, student_id: str, name: Optional[str], email: Optional[str]
    ) -> Tuple[str, str]:
        if name and email:
            return str(name), str(email)
        for student in self._roster.list_active_students():
            if student.student_id == student_id:
                return str(name or student.name), str(email or student.email)
        raise ValidationError(
            f"Student {student_id} is not on the roster; studentName and studentEmail are required"
        )
