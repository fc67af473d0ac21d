from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from club_attendance.attendance.clock import current_session, week_number
from club_attendance.settings.model import AttendanceConfig, SessionStart


@pytest.fixture
def config():
    return AttendanceConfig.defaults()


@pytest.mark.parametrize(
    "hour, minute, second, remaining",
    [
        (15, 20, 0, 5),
        (15, 22, 0, 3),
        (15, 24, 59, 1),
    ],
)
def test_on_time_window(config, hour, minute, second, remaining):
    window = current_session(config, datetime(2026, 1, 13, hour, minute, second))

    assert window is not None
    assert window.session_number == 1
    assert window.session_time == "15:20"
    assert window.minutes_remaining == remaining
    assert not window.is_late


@pytest.mark.parametrize("minute", [25, 27, 29])
def test_late_window(config, minute):
    window = current_session(config, datetime(2026, 1, 13, 15, minute, 30))

    assert window is not None
    assert window.session_number == 1
    assert window.minutes_remaining <= 0
    assert window.is_late


@pytest.mark.parametrize("when", [datetime(2026, 1, 13, 15, 30), datetime(2026, 1, 13, 15, 19, 59)])
def test_closed_outside_both_spans(config, when):
    assert current_session(config, when) is None


def test_second_session(config):
    window = current_session(config, datetime(2026, 1, 13, 16, 36))

    assert window.session_number == 2
    assert window.session_time == "16:35"
    assert window.minutes_remaining == 4


def test_wrong_weekday_is_closed(config):
    # Wednesday
    assert current_session(config, datetime(2026, 1, 14, 15, 22)) is None


def test_debug_mode_always_reports_session_one(config):
    window = current_session(config, datetime(2026, 1, 17, 3, 0), debug_mode=True)

    assert window.session_number == 1
    assert window.session_time == "15:20"
    assert window.minutes_remaining == config.session1_duration

    debug_config = replace(config, debug_mode=True)
    assert current_session(debug_config, datetime(2026, 1, 17, 3, 0)).session_number == 1


def test_overlap_prefers_on_time_session(config):
    # session 1 late window runs until 16:40, session 2 starts at 16:20
    overlapping = replace(config, session1_duration=40, session2_start=SessionStart(16, 20))

    window = current_session(overlapping, datetime(2026, 1, 13, 16, 22))

    assert window.session_number == 2
    assert not window.is_late


def test_week_number(config):
    assert week_number(config, datetime(2026, 1, 6, 0, 0)) == 1
    assert week_number(config, datetime(2026, 1, 12, 23, 59)) == 1
    assert week_number(config, datetime(2026, 1, 13, 15, 22)) == 2
    assert week_number(config, datetime(2026, 1, 20, 9, 0)) == 3


def test_week_number_clamps_before_anchor(config):
    assert week_number(config, datetime(2025, 12, 1)) == 1


def test_week_number_is_monotonic(config):
    start = datetime(2025, 12, 20)
    weeks = [week_number(config, start + timedelta(hours=13 * i)) for i in range(200)]

    assert weeks == sorted(weeks)
