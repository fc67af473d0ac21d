"""Read-side views over the ledger: session lists, week summaries, exports."""

from __future__ import annotations

import csv
import io
import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from ..core.constants import DEFAULT_LEGACY_TOLERANCE_MINUTES
from ..core.enums import STATUS_ORDER, AttendanceStatus
from ..roster.model import Student
from ..roster.repository import RosterProvider
from ..settings.service import SettingsService
from .clock import SESSION_NUMBERS
from .ledger import AttendanceLedger
from .model import AttendanceRecord, RecordKey
from .session_matcher import SessionMatcher, resolve_session

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "weekNumber",
    "sessionNumber",
    "sessionTime",
    "studentId",
    "studentName",
    "studentEmail",
    "status",
    "checkInTime",
    "notes",
]


def _empty_stats() -> Dict[str, int]:
    stats = {"total": 0}
    stats.update({s.value: 0 for s in AttendanceStatus})
    return stats


def count_statuses(rows: Sequence[Dict[str, Any]]) -> Dict[str, int]:
    stats = _empty_stats()
    for row in rows:
        stats["total"] += 1
        stats[row["status"]] = stats.get(row["status"], 0) + 1
    return stats


def sort_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda r: (STATUS_ORDER.get(r["status"], 99), r.get("studentName") or ""))


def _placeholder(student: Student, key: RecordKey, session_time: str) -> Dict[str, Any]:
    return {
        "id": key.serialize(),
        "uniqueKey": key.serialize(),
        "studentId": student.student_id,
        "studentName": student.name,
        "studentEmail": student.email,
        "sessionNumber": key.session_number,
        "sessionTime": session_time,
        "weekNumber": key.week_number,
        "status": AttendanceStatus.PENDING.value,
        "checkInTime": None,
        "notes": "",
        "isPending": True,
    }


class AttendanceReportService:
    def __init__(
        self,
        ledger: AttendanceLedger,
        roster: RosterProvider,
        settings: SettingsService,
        *,
        tolerance_minutes: int = DEFAULT_LEGACY_TOLERANCE_MINUTES,
        diagnostics_sample: int = 20,
    ):
        self._ledger = ledger
        self._roster = roster
        self._settings = settings
        self._tolerance = int(tolerance_minutes)
        self._sample = int(diagnostics_sample)

    def _matcher(self):
        config, _ = self._settings.get_config()
        return config, SessionMatcher(config, tolerance_minutes=self._tolerance)

    def _students(self) -> List[Student]:
        # Padding with the roster is best effort; the recorded rows are still returned.
        try:
            return list(self._roster.list_active_students())
        except Exception:
            logger.warning("Roster unavailable, records are returned without padding", exc_info=True)
            return []

    def _session_rows(
        self,
        records: Sequence[AttendanceRecord],
        students: Sequence[Student],
        *,
        session_number: int,
        session_time: str,
        week_number: int,
        include_all: bool,
    ) -> List[Dict[str, Any]]:
        rows = [r.to_dict() for r in records]
        if include_all:
            have_record = {r.student_id for r in records}
            rows.extend(
                _placeholder(s, RecordKey(s.student_id, session_number, week_number), session_time)
                for s in students
                if s.student_id not in have_record
            )
        return sort_rows(rows)

    def session_records(
        self,
        *,
        session_time: str,
        week_number: int,
        include_all: bool = True,
        session_number: Optional[int] = None,
    ) -> Dict[str, Any]:
        config, matcher = self._matcher()
        number, label = resolve_session(config, session_time, session_number, tolerance_minutes=self._tolerance)
        records = matcher.filter(self._ledger.list_for_week(week_number), number)
        rows = self._session_rows(
            records,
            self._students() if include_all else [],
            session_number=number,
            session_time=label,
            week_number=week_number,
            include_all=include_all,
        )
        return {
            "sessionNumber": number,
            "sessionTime": label,
            "weekNumber": week_number,
            "records": rows,
            "stats": count_statuses(rows),
        }

    def week_summary(self, *, week_number: int, include_all: bool = True) -> Dict[str, Any]:
        config, matcher = self._matcher()
        week_records = self._ledger.list_for_week(week_number)
        students = self._students() if include_all else []

        sessions = {}
        unmatched = 0
        by_session: Dict[int, List[AttendanceRecord]] = {n: [] for n in SESSION_NUMBERS}
        for record in week_records:
            n = matcher.session_of(record)
            if n is None:
                unmatched += 1
            else:
                by_session[n].append(record)

        for n in SESSION_NUMBERS:
            rows = self._session_rows(
                by_session[n],
                students,
                session_number=n,
                session_time=config.session_label(n),
                week_number=week_number,
                include_all=include_all,
            )
            sessions[f"session{n}"] = {
                "sessionNumber": n,
                "sessionTime": config.session_label(n),
                "records": rows,
                "stats": count_statuses(rows),
            }

        return {
            "weekNumber": week_number,
            "sessions": sessions,
            "totalStudents": len(students),
            "unmatchedRecords": unmatched,
        }

    def session_stats(
        self, *, session_time: str, week_number: int, session_number: Optional[int] = None
    ) -> Dict[str, Any]:
        config, matcher = self._matcher()
        number, label = resolve_session(config, session_time, session_number, tolerance_minutes=self._tolerance)
        records = matcher.filter(self._ledger.list_for_week(week_number), number)
        stats = count_statuses([r.to_dict() for r in records])
        return {
            "sessionNumber": number,
            "sessionTime": label,
            "weekNumber": week_number,
            "stats": stats,
            "isInitialized": stats["total"] > 0,
        }

    def export_csv(self, *, week_number: int) -> str:
        summary = self.week_summary(week_number=week_number, include_all=True)
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        for n in SESSION_NUMBERS:
            for row in summary["sessions"][f"session{n}"]["records"]:
                writer.writerow(row)
        return buf.getvalue()

    def diagnostics(self, *, limit: int = 500) -> Dict[str, Any]:
        records = self._ledger.list_recent(limit)
        by_status = Counter(r.status.value for r in records)
        by_label = Counter(r.session_time or "(none)" for r in records)
        by_week = Counter(r.week_number for r in records)
        return {
            "totalRecords": len(records),
            "byStatus": dict(by_status),
            "bySessionTime": dict(by_label),
            "byWeek": {str(k): v for k, v in sorted(by_week.items())},
            "sample": [r.to_dict() for r in records[: self._sample]],
        }
