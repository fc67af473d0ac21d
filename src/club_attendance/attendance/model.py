from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class RecordKey:
    """Identity of a ledger record: one per (student, session, week)."""

    student_id: str
    session_number: int
    week_number: int

    def serialize(self) -> str:
        return f"{self.student_id}_{self.session_number}_{self.week_number}"

    def __str__(self) -> str:
        return self.serialize()

    @classmethod
    def parse(cls, value: str) -> "RecordKey":
        """Inverse of `serialize`; the student id itself may contain underscores."""

        parts = str(value or "").rsplit("_", 2)
        if len(parts) != 3 or not parts[0]:
            raise ValidationError(f"Invalid record key: {value!r}")
        student_id, session_s, week_s = parts
        if session_s not in {"1", "2"} or not week_s.isdigit() or int(week_s) < 1:
            raise ValidationError(f"Invalid record key: {value!r}")
        return cls(student_id=student_id, session_number=int(session_s), week_number=int(week_s))

    @classmethod
    def try_parse(cls, value: str) -> Optional["RecordKey"]:
        try:
            return cls.parse(value)
        except ValidationError:
            return None


@dataclass(frozen=True)
class AttendanceRecord:
    """Ledger row. `session_number` is None only for imported legacy rows."""

    unique_key: str
    student_id: str
    student_name: str
    student_email: str
    session_number: Optional[int]
    session_time: str
    week_number: int
    status: AttendanceStatus
    check_in_time: Optional[datetime]
    notes: str
    created_at: datetime

    @classmethod
    def new(
        cls,
        key: RecordKey,
        *,
        student_name: str,
        student_email: str,
        session_time: str,
        status: AttendanceStatus,
        now: datetime,
        notes: str = "",
    ) -> "AttendanceRecord":
        return cls(
            unique_key=key.serialize(),
            student_id=key.student_id,
            student_name=student_name,
            student_email=student_email,
            session_number=key.session_number,
            session_time=session_time,
            week_number=key.week_number,
            status=status,
            check_in_time=None if status is AttendanceStatus.PENDING else now,
            notes=notes,
            created_at=now,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.unique_key,
            "uniqueKey": self.unique_key,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "studentEmail": self.student_email,
            "sessionNumber": self.session_number,
            "sessionTime": self.session_time,
            "weekNumber": self.week_number,
            "status": self.status.value,
            "checkInTime": self.check_in_time.isoformat() if self.check_in_time else None,
            "notes": self.notes,
            "isPending": False,
        }
