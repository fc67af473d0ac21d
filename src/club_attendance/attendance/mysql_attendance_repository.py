from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT unique_key, student_id, student_name, student_email, session_number, session_time,
           week_number, status, check_in_time, notes, created_at
    FROM attendance_records
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    session_number = r.get("session_number")
    return AttendanceRecord(
        unique_key=r["unique_key"],
        student_id=str(r["student_id"]),
        student_name=r.get("student_name") or "",
        student_email=r.get("student_email") or "",
        session_number=int(session_number) if session_number is not None else None,
        session_time=r.get("session_time") or "",
        week_number=int(r["week_number"]),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        notes=r.get("notes") or "",
        created_at=r["created_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, unique_key: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE unique_key=%s", (unique_key,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        unique_key, student_id, student_name, student_email, session_number,
                        session_time, week_number, status, check_in_time, notes, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.unique_key,
                        record.student_id,
                        record.student_name,
                        record.student_email,
                        record.session_number,
                        record.session_time,
                        record.week_number,
                        record.status.value,
                        record.check_in_time,
                        record.notes,
                        record.created_at,
                    ),
                )
        except Exception as exc:
            if is_duplicate_key(exc):
                raise DuplicateRecordError(record.unique_key) from exc
            raise

    def transition_pending(
        self,
        unique_key: str,
        *,
        status: AttendanceStatus,
        check_in_time: datetime,
        notes: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, check_in_time=%s, notes=%s
                WHERE unique_key=%s AND status=%s
                """,
                (status.value, check_in_time, notes, unique_key, AttendanceStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def overwrite_status(
        self,
        unique_key: str,
        *,
        status: AttendanceStatus,
        check_in_time: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if notes is None:
                cur.execute(
                    "UPDATE attendance_records SET status=%s, check_in_time=%s WHERE unique_key=%s",
                    (status.value, check_in_time, unique_key),
                )
            else:
                cur.execute(
                    "UPDATE attendance_records SET status=%s, check_in_time=%s, notes=%s WHERE unique_key=%s",
                    (status.value, check_in_time, notes, unique_key),
                )
            if cur.rowcount > 0:
                return True
            # rowcount is 0 for a matched row whose values did not change
            cur.execute("SELECT 1 AS found FROM attendance_records WHERE unique_key=%s", (unique_key,))
            return fetchone(cur) is not None

    def list_for_week(self, week_number: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE week_number=%s ORDER BY created_at ASC", (int(week_number),))
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY created_at DESC LIMIT %s", (int(limit),))
            return [_to_record(r) for r in fetchall(cur)]
