from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles read from the session established by the login layer."""

    ADMIN = "admin"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Ledger status stored in `attendance_records.status`."""

    PENDING = "pending"
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"

    @property
    def is_terminal(self) -> bool:
        return self is not AttendanceStatus.PENDING


# Display order used by the record views.
STATUS_ORDER = {
    AttendanceStatus.PRESENT: 0,
    AttendanceStatus.LATE: 1,
    AttendanceStatus.PENDING: 2,
    AttendanceStatus.ABSENT: 3,
}
