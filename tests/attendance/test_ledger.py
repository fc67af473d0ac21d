from __future__ import annotations

from datetime import timedelta

import pytest

from club_attendance.attendance.ledger import AttendanceLedger
from club_attendance.attendance.model import RecordKey
from club_attendance.core.enums import AttendanceStatus
from club_attendance.core.exceptions import AlreadyCheckedInError


def test_upsert_pending_returns_existing_row(attendance_repo, fixed_now):
    ledger = AttendanceLedger(attendance_repo)
    key = RecordKey("12345", 1, 3)

    first, created = ledger.upsert_pending(
        key, student_name="An Nguyen", student_email="12345@school.edu", session_time="15:20", now=fixed_now
    )
    again, created_again = ledger.upsert_pending(
        key, student_name="An Nguyen", student_email="12345@school.edu", session_time="15:20", now=fixed_now
    )

    assert (created, created_again) == (True, False)
    assert again == first


def test_lost_transition_reports_the_winning_status(attendance_repo, fixed_now):
    ledger = AttendanceLedger(attendance_repo)
    key = RecordKey("12345", 1, 3)
    pending, _ = ledger.upsert_pending(
        key, student_name="An Nguyen", student_email="12345@school.edu", session_time="15:20", now=fixed_now
    )
    ledger.transition(pending, status=AttendanceStatus.PRESENT, now=fixed_now)

    with pytest.raises(AlreadyCheckedInError) as exc:
        ledger.transition(pending, status=AttendanceStatus.LATE, now=fixed_now + timedelta(minutes=4))

    assert exc.value.status == "present"
    assert exc.value.message == "You already checked in for session 1 this week (status: present)"
    assert key.serialize() not in exc.value.message
    assert attendance_repo.rows[key.serialize()].status is AttendanceStatus.PRESENT
