from __future__ import annotations

from datetime import timedelta

import pytest

from club_attendance.core.enums import AttendanceStatus
from club_attendance.core.exceptions import DuplicateRecordError, ValidationError


def test_override_moves_record_out_of_terminal_state(container, attendance_repo, fixed_now):
    container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now)

    record, created = container.attendance_service.set_status(
        "12345_1_3", "present", notes="was at the door", now=fixed_now + timedelta(hours=1)
    )

    assert created is False
    assert record.status is AttendanceStatus.PRESENT
    assert record.notes == "was at the door"
    assert attendance_repo.rows["12345_1_3"].check_in_time == fixed_now + timedelta(hours=1)


def test_override_keeps_notes_when_not_given(container, attendance_repo, fixed_now):
    container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now)

    record, _ = container.attendance_service.set_status("12345_1_3", "late", now=fixed_now)

    assert record.notes == attendance_repo.rows["12345_1_3"].notes != ""


@pytest.mark.parametrize("status", ["pending", "present", "late", "absent"])
def test_override_accepts_every_status(container, status, fixed_now):
    record, _ = container.attendance_service.set_status("12345_2_3", status, now=fixed_now)

    assert record.status.value == status


def test_override_creates_missing_record_from_key(container, attendance_repo, fixed_now):
    record, created = container.attendance_service.set_status("23456_2_7", "late", now=fixed_now)

    assert created is True
    assert record.student_id == "23456"
    assert record.session_number == 2
    assert record.week_number == 7
    assert record.session_time == "16:35"
    assert record.student_name == "Binh Tran"
    assert attendance_repo.rows["23456_2_7"].status is AttendanceStatus.LATE


def test_override_unknown_student_needs_name_and_email(container, fixed_now):
    with pytest.raises(ValidationError):
        container.attendance_service.set_status("99999_1_3", "present", now=fixed_now)

    record, created = container.attendance_service.set_status(
        "99999_1_3", "present", student_name="Guest", student_email="guest@school.edu", now=fixed_now
    )
    assert created is True
    assert record.student_name == "Guest"


@pytest.mark.parametrize("key", ["12345", "12345_3_1", "12345_1_0", "_1_2", "12345_a_b"])
def test_override_rejects_malformed_keys(container, key):
    with pytest.raises(ValidationError):
        container.attendance_service.set_status(key, "present")


def test_override_rejects_unknown_status(container):
    with pytest.raises(ValidationError):
        container.attendance_service.set_status("12345_1_3", "excused")


def test_admin_create_record_collides_with_existing(container, fixed_now):
    payload = {"studentId": "12345", "sessionNumber": 1, "weekNumber": 3, "status": "present"}
    record = container.attendance_service.create_record(payload, now=fixed_now)

    assert record.unique_key == "12345_1_3"
    assert record.student_email == "12345@school.edu"

    with pytest.raises(DuplicateRecordError):
        container.attendance_service.create_record(payload, now=fixed_now)
