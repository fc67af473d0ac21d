from __future__ import annotations

from datetime import timedelta

import pytest

from club_attendance.core.constants import NOTE_SYSTEM_BACKFILL, NOTE_SYSTEM_CLOSED
from club_attendance.core.enums import AttendanceStatus
from club_attendance.core.exceptions import ValidationError


def test_sweep_closes_pending_records(container, attendance_repo, fixed_now):
    container.initializer.initialize(session_time="15:20", week_number=3, now=fixed_now)

    summary = container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now + timedelta(minutes=10))

    assert summary.updated_count == 3
    assert summary.created_count == 0
    for record in attendance_repo.rows.values():
        assert record.status is AttendanceStatus.ABSENT
        assert record.notes == NOTE_SYSTEM_CLOSED
        assert record.check_in_time == fixed_now + timedelta(minutes=10)


def test_sweep_backfills_students_without_records(container, attendance_repo, fixed_now):
    summary = container.sweeper.sweep(session_time="15:20", week_number=3, mark_as="late", now=fixed_now)

    assert summary.created_count == 3
    assert summary.marked_as == "late"
    assert {r.status for r in attendance_repo.rows.values()} == {AttendanceStatus.LATE}
    assert {r.notes for r in attendance_repo.rows.values()} == {NOTE_SYSTEM_BACKFILL}


def test_sweep_is_idempotent(container, attendance_repo, fixed_now):
    container.initializer.initialize(session_time="15:20", week_number=3, now=fixed_now)
    container.attendance_service.check_in(
        student_id="12345", student_name="An Nguyen", student_email="12345@school.edu", now=fixed_now
    )

    first = container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now)
    state = dict(attendance_repo.rows)
    second = container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now + timedelta(hours=1))

    assert first.updated_count == 2
    assert (second.updated_count, second.created_count) == (0, 0)
    assert attendance_repo.rows == state


def test_sweep_only_touches_the_target_session(container, attendance_repo, fixed_now):
    container.initializer.initialize(session_time="16:35", week_number=3, now=fixed_now)

    container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now)

    assert attendance_repo.rows["12345_2_3"].status is AttendanceStatus.PENDING
    assert attendance_repo.rows["12345_1_3"].status is AttendanceStatus.ABSENT


def test_sweep_failures_are_counted_and_batch_continues(container, attendance_repo, fixed_now):
    attendance_repo.failing_keys.add("34567_1_3")

    summary = container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now)

    assert summary.created_count == 2
    assert summary.failed_count == 1
    assert "34567_1_3" not in attendance_repo.rows


def test_sweep_rejects_unknown_mark_as(container, fixed_now):
    with pytest.raises(ValidationError):
        container.sweeper.sweep(session_time="15:20", week_number=3, mark_as="present", now=fixed_now)


def test_summary_payload_uses_updated_and_created(container, fixed_now):
    body = container.sweeper.sweep(session_time="15:20", week_number=3, now=fixed_now).to_dict()

    assert body["updated"] == 0
    assert body["created"] == 3
    assert body["markedAs"] == "absent"
