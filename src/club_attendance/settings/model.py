from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from ..common.datetime_utils import format_hhmm, parse_iso_date
from ..core import constants


@dataclass(frozen=True)
class SessionStart:
    """Wall-clock start of one daily session."""

    hour: int
    minute: int

    @property
    def label(self) -> str:
        return format_hhmm(self.hour, self.minute)

    @property
    def minutes_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def to_dict(self) -> Dict[str, int]:
        return {"hour": self.hour, "minute": self.minute}


@dataclass(frozen=True)
class AttendanceConfig:
    """Weekly attendance schedule (one row, `doc_id='attendance_config'`)."""

    day_of_week: int
    session1_start: SessionStart
    session1_duration: int
    session2_start: SessionStart
    session2_duration: int
    week_start_date: date
    debug_mode: bool = False

    @classmethod
    def defaults(cls) -> "AttendanceConfig":
        return cls(
            day_of_week=constants.DEFAULT_DAY_OF_WEEK,
            session1_start=SessionStart(*constants.DEFAULT_SESSION1_START),
            session1_duration=constants.DEFAULT_SESSION_DURATION,
            session2_start=SessionStart(*constants.DEFAULT_SESSION2_START),
            session2_duration=constants.DEFAULT_SESSION_DURATION,
            week_start_date=parse_iso_date(constants.DEFAULT_WEEK_START_DATE),
        )

    def session_start(self, session_number: int) -> SessionStart:
        return self.session1_start if session_number == 1 else self.session2_start

    def session_duration(self, session_number: int) -> int:
        return self.session1_duration if session_number == 1 else self.session2_duration

    def session_label(self, session_number: int) -> str:
        return self.session_start(session_number).label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayOfWeek": self.day_of_week,
            "session1Start": self.session1_start.to_dict(),
            "session1Duration": self.session1_duration,
            "session2Start": self.session2_start.to_dict(),
            "session2Duration": self.session2_duration,
            "weekStartDate": self.week_start_date.strftime("%Y-%m-%d"),
            "debugMode": self.debug_mode,
        }


@dataclass(frozen=True)
class AttendanceSettings:
    """Stored settings document: the schedule plus the verification code state."""

    config: AttendanceConfig = field(default_factory=AttendanceConfig.defaults)
    verification_code: Optional[str] = None
    code_enabled: bool = False
    code_created_at: Optional[datetime] = None

    def code_expires_at(self, ttl_minutes: int) -> Optional[datetime]:
        if self.code_created_at is None:
            return None
        return self.code_created_at + timedelta(minutes=ttl_minutes)

    def has_live_code(self, now: datetime, ttl_minutes: int) -> bool:
        expires_at = self.code_expires_at(ttl_minutes)
        return bool(self.verification_code) and expires_at is not None and now < expires_at

    def with_config(self, config: AttendanceConfig) -> "AttendanceSettings":
        return replace(self, config=config)
