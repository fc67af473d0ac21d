from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from club_attendance.attendance.model import AttendanceRecord
from club_attendance.container import build_services
from club_attendance.core.constants import SETTINGS_DOC_ID
from club_attendance.core.enums import AttendanceStatus
from club_attendance.core.exceptions import DuplicateRecordError
from club_attendance.roster.model import Student
from club_attendance.settings.model import AttendanceConfig, AttendanceSettings
from club_attendance.settings.service import apply_fields


class InMemorySettings:
    def __init__(self, settings: Optional[AttendanceSettings] = None):
        self._settings = settings
        self._lock = threading.Lock()

    def get(self) -> Optional[AttendanceSettings]:
        return self._settings

    def create(self, settings: AttendanceSettings) -> None:
        with self._lock:
            if self._settings is not None:
                raise DuplicateRecordError(SETTINGS_DOC_ID)
            self._settings = settings

    def update(self, fields) -> bool:
        with self._lock:
            if self._settings is None:
                return False
            self._settings = apply_fields(self._settings, fields)
            return True


class InMemoryAttendance:
    """Exclusive create on unique_key and a conditional pending transition, like the MySQL table."""

    def __init__(self):
        self.rows: dict[str, AttendanceRecord] = {}
        self.failing_keys: set[str] = set()
        self._lock = threading.Lock()

    def get(self, unique_key: str) -> Optional[AttendanceRecord]:
        return self.rows.get(unique_key)

    def create(self, record: AttendanceRecord) -> None:
        with self._lock:
            if record.unique_key in self.failing_keys:
                raise ConnectionError("store unavailable")
            if record.unique_key in self.rows:
                raise DuplicateRecordError(record.unique_key)
            self.rows[record.unique_key] = record

    def transition_pending(self, unique_key, *, status, check_in_time, notes) -> bool:
        with self._lock:
            current = self.rows.get(unique_key)
            if current is None or current.status is not AttendanceStatus.PENDING:
                return False
            self.rows[unique_key] = replace(current, status=status, check_in_time=check_in_time, notes=notes)
            return True

    def overwrite_status(self, unique_key, *, status, check_in_time, notes=None) -> bool:
        with self._lock:
            current = self.rows.get(unique_key)
            if current is None:
                return False
            self.rows[unique_key] = replace(
                current,
                status=status,
                check_in_time=check_in_time,
                notes=current.notes if notes is None else notes,
            )
            return True

    def list_for_week(self, week_number: int):
        return [r for r in self.rows.values() if r.week_number == week_number]

    def list_recent(self, limit: int):
        return sorted(self.rows.values(), key=lambda r: r.created_at, reverse=True)[:limit]


class InMemoryRoster:
    def __init__(self, students):
        self.students = list(students)
        self.unavailable = False

    def list_active_students(self):
        if self.unavailable:
            raise ConnectionError("roster unavailable")
        return list(self.students)


@pytest.fixture
def fixed_now() -> datetime:
    # Tuesday of week 3 (weekStartDate 2026-01-06), inside session 1's on-time window.
    return datetime(2026, 1, 20, 15, 22, 0)


@pytest.fixture
def students():
    return [
        Student(id="1", student_id="12345", name="An Nguyen", email="12345@school.edu"),
        Student(id="2", student_id="23456", name="Binh Tran", email="23456@school.edu"),
        Student(id="3", student_id="34567", name="Chi Le", email="34567@school.edu"),
    ]


@pytest.fixture
def settings_repo():
    return InMemorySettings(AttendanceSettings(config=AttendanceConfig.defaults()))


@pytest.fixture
def empty_settings_repo():
    return InMemorySettings()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def roster(students):
    return InMemoryRoster(students)


@pytest.fixture
def container(settings_repo, attendance_repo, roster):
    return build_services(settings_repo=settings_repo, attendance_repo=attendance_repo, roster=roster)


@pytest.fixture
def app(container):
    from club_attendance.main import create_app

    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["role"] = "admin"
    return client
