from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from club_attendance.core.exceptions import InvalidCodeError, ValidationError
from club_attendance.settings.model import SessionStart
from club_attendance.settings.service import SettingsService, describe_schedule

NOW = datetime(2026, 1, 20, 15, 0)


def _codes(*values):
    it = iter(values)
    return lambda: next(it)


def test_missing_settings_fall_back_to_defaults(empty_settings_repo):
    config, source = SettingsService(empty_settings_repo).get_config()

    assert source == "default"
    assert config.day_of_week == 2
    assert config.session1_start == SessionStart(15, 20)
    assert config.session2_start == SessionStart(16, 35)
    assert config.week_start_date == date(2026, 1, 6)


def test_first_update_creates_the_document(empty_settings_repo):
    service = SettingsService(empty_settings_repo)

    config = service.update_config({"dayOfWeek": 4, "session1Start": {"hour": 9, "minute": 5}})

    assert config.day_of_week == 4
    assert config.session1_start.label == "09:05"
    assert config.session2_start.label == "16:35"
    assert service.get_config()[1] == "database"


def test_partial_update_keeps_other_fields(settings_repo):
    service = SettingsService(settings_repo)

    config = service.update_config({"session2Duration": 15, "weekStartDate": "2026-02-03"})

    assert config.session2_duration == 15
    assert config.week_start_date == date(2026, 2, 3)
    assert config.session1_duration == 5


@pytest.mark.parametrize(
    "payload",
    [
        {"dayOfWeek": 7},
        {"session1Start": {"hour": 24, "minute": 0}},
        {"session1Start": "25:00"},
        {"session2Duration": 0},
        {"weekStartDate": "06/01/2026"},
        {"debugMode": "maybe"},
        {},
    ],
)
def test_invalid_config_is_rejected(settings_repo, payload):
    with pytest.raises(ValidationError):
        SettingsService(settings_repo).update_config(payload)


def test_generate_and_verify_code(settings_repo):
    service = SettingsService(settings_repo, code_generator=_codes("4821"))

    settings = service.generate_code(now=NOW)
    assert settings.verification_code == "4821"
    assert settings.code_enabled is True

    current = service.load(now=NOW + timedelta(minutes=1))
    service.verify_code(current, "4821", now=NOW + timedelta(minutes=1))
    with pytest.raises(InvalidCodeError):
        service.verify_code(current, "1234", now=NOW + timedelta(minutes=1))
    with pytest.raises(InvalidCodeError):
        service.verify_code(current, "", now=NOW + timedelta(minutes=1))


def test_expired_code_is_rejected(settings_repo):
    service = SettingsService(settings_repo, code_generator=_codes("4821"))
    settings = service.generate_code(now=NOW)

    with pytest.raises(InvalidCodeError):
        service.verify_code(settings, "4821", now=NOW + timedelta(minutes=10))


def test_load_regenerates_expired_code(settings_repo):
    service = SettingsService(settings_repo, code_generator=_codes("1111", "2222"))
    service.generate_code(now=NOW)

    settings = service.load(now=NOW + timedelta(minutes=11))

    assert settings.verification_code == "2222"
    assert settings_repo.get().code_created_at == NOW + timedelta(minutes=11)


def test_toggle_and_clear_code(settings_repo):
    service = SettingsService(settings_repo, code_generator=_codes("3333"))

    assert service.set_code_enabled(True, now=NOW).verification_code == "3333"
    assert service.set_code_enabled(False, now=NOW).code_enabled is False

    service.clear_code()
    stored = settings_repo.get()
    assert stored.verification_code is None
    assert stored.code_enabled is False
    service.verify_code(stored, None, now=NOW)


def test_generated_codes_are_four_digits(settings_repo):
    service = SettingsService(settings_repo)

    for _ in range(20):
        code = service.generate_code(now=NOW).verification_code
        assert len(code) == 4 and code.isdigit() and code[0] != "0"


def test_describe_schedule(settings_repo):
    config, _ = SettingsService(settings_repo).get_config()

    assert describe_schedule(config) == (
        "Attendance is held every Tuesday: session 1 at 15:20 (5 min), session 2 at 16:35 (5 min)"
    )
