import pytest

from club_attendance.attendance.clock import SessionWindow
from club_attendance.attendance.factory import AttendanceStrategyFactory
from club_attendance.attendance.strategies.absent_strategy import AbsentStrategy
from club_attendance.attendance.strategies.late_strategy import LateStrategy
from club_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy
from club_attendance.core.constants import NOTE_DEBUG_CHECKIN, NOTE_SYSTEM_BACKFILL, NOTE_SYSTEM_CLOSED
from club_attendance.core.enums import AttendanceStatus
from club_attendance.core.exceptions import ValidationError


def test_factory_checkin_on_time_while_minutes_remain():
    window = SessionWindow(session_number=1, session_time="15:20", minutes_remaining=1)

    strategy = AttendanceStrategyFactory().for_checkin(window=window)

    assert isinstance(strategy, OnTimeStrategy)
    assert strategy.decide_checkin(window=window, debug_mode=False).status is AttendanceStatus.PRESENT


def test_factory_checkin_late_at_zero_minutes_remaining():
    window = SessionWindow(session_number=1, session_time="15:20", minutes_remaining=0)

    strategy = AttendanceStrategyFactory().for_checkin(window=window)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_checkin(window=window, debug_mode=False).status is AttendanceStatus.LATE


def test_debug_checkin_is_annotated():
    window = SessionWindow(session_number=1, session_time="15:20", minutes_remaining=5)

    decision = OnTimeStrategy().decide_checkin(window=window, debug_mode=True)

    assert decision.note == NOTE_DEBUG_CHECKIN


@pytest.mark.parametrize("mark_as, expected", [("absent", AbsentStrategy), ("late", LateStrategy)])
def test_factory_close_strategies(mark_as, expected):
    strategy = AttendanceStrategyFactory().for_close(mark_as=mark_as)

    assert isinstance(strategy, expected)
    assert strategy.decide_close(backfill=False).note == NOTE_SYSTEM_CLOSED
    assert strategy.decide_close(backfill=True).note == NOTE_SYSTEM_BACKFILL
    assert strategy.decide_close(backfill=True).status.value == mark_as


@pytest.mark.parametrize("mark_as", ["present", "pending", "excused"])
def test_factory_rejects_other_close_statuses(mark_as):
    with pytest.raises(ValidationError):
        AttendanceStrategyFactory().for_close(mark_as=mark_as)


def test_on_time_strategy_cannot_close_a_session():
    with pytest.raises(ValidationError):
        OnTimeStrategy().decide_close(backfill=False)


def test_absent_strategy_cannot_decide_a_check_in():
    window = SessionWindow(session_number=1, session_time="15:20", minutes_remaining=3)

    with pytest.raises(ValidationError):
        AbsentStrategy().decide_checkin(window=window, debug_mode=False)
