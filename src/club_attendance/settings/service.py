from __future__ import annotations

import logging
import secrets
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..common.datetime_utils import now_local, parse_hhmm, parse_iso_date
from ..common.validators import require_bool, require_int
from ..core import constants
from ..core.exceptions import DuplicateRecordError, InvalidCodeError, ValidationError
from ..core.logging_utils import log_business_event
from .model import AttendanceConfig, AttendanceSettings, SessionStart
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_CONFIG_FIELDS = {
    "day_of_week",
    "session1_start",
    "session1_duration",
    "session2_start",
    "session2_duration",
    "week_start_date",
    "debug_mode",
}


def generate_code() -> str:
    """Random 4-digit numeric code (1000-9999)."""
    return str(1000 + secrets.randbelow(9000))


def _parse_session_start(value: Any, field_name: str) -> SessionStart:
    if isinstance(value, Mapping):
        hour = require_int(value.get("hour"), f"{field_name}.hour", minimum=0, maximum=23)
        minute = require_int(value.get("minute"), f"{field_name}.minute", minimum=0, maximum=59)
        return SessionStart(hour, minute)
    parsed = parse_hhmm(str(value)) if isinstance(value, str) else None
    if parsed is None:
        raise ValidationError(f"{field_name} must be {{hour, minute}} or HH:MM")
    return SessionStart(*parsed)


def parse_config_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a partial config payload (JSON names) into repository fields."""

    fields: Dict[str, Any] = {}
    if "dayOfWeek" in payload:
        fields["day_of_week"] = require_int(payload["dayOfWeek"], "dayOfWeek", minimum=0, maximum=6)
    for n in (1, 2):
        start_key, duration_key = f"session{n}Start", f"session{n}Duration"
        if start_key in payload:
            fields[f"session{n}_start"] = _parse_session_start(payload[start_key], start_key)
        if duration_key in payload:
            fields[f"session{n}_duration"] = require_int(
                payload[duration_key], duration_key, minimum=1, maximum=constants.MAX_SESSION_DURATION
            )
    if "weekStartDate" in payload:
        try:
            fields["week_start_date"] = parse_iso_date(str(payload["weekStartDate"]))
        except ValueError:
            raise ValidationError("weekStartDate must be YYYY-MM-DD") from None
    if "debugMode" in payload:
        fields["debug_mode"] = require_bool(payload["debugMode"], "debugMode")
    return fields


def apply_fields(settings: AttendanceSettings, fields: Mapping[str, Any]) -> AttendanceSettings:
    config_fields = {k: v for k, v in fields.items() if k in _CONFIG_FIELDS}
    other_fields = {k: v for k, v in fields.items() if k not in _CONFIG_FIELDS}
    updated = settings.with_config(replace(settings.config, **config_fields))
    return replace(updated, **other_fields)


def describe_schedule(config: AttendanceConfig) -> str:
    day = constants.DAY_NAMES[config.day_of_week]
    return (
        f"Attendance is held every {day}: "
        f"session 1 at {config.session1_start.label} ({config.session1_duration} min), "
        f"session 2 at {config.session2_start.label} ({config.session2_duration} min)"
    )


class SettingsService:
    """Use cases around the attendance settings document.

    A missing document is not an error: reads fall back to the defaults and
    the first write creates it.
    """

    def __init__(
        self,
        settings: SettingsRepository,
        *,
        code_ttl_minutes: int = constants.DEFAULT_CODE_TTL_MINUTES,
        code_generator: Optional[Callable[[], str]] = None,
    ):
        self._settings = settings
        self._code_ttl = int(code_ttl_minutes)
        self._generate_code = code_generator or generate_code

    @property
    def code_ttl_minutes(self) -> int:
        return self._code_ttl

    def get_config(self) -> Tuple[AttendanceConfig, str]:
        stored = self._settings.get()
        if stored is None:
            logger.info("Attendance settings missing, using defaults")
            return AttendanceConfig.defaults(), "default"
        return stored.config, "database"

    def load(self, *, now: Optional[datetime] = None) -> AttendanceSettings:
        """Read the settings, regenerating an expired code while codes are enabled."""

        now = now or now_local()
        settings = self._settings.get() or AttendanceSettings()

        if settings.code_enabled and not settings.has_live_code(now, self._code_ttl):
            fields = self._new_code_fields(now)
            self._save(fields)
            settings = apply_fields(settings, fields)
            logger.info("Verification code expired, regenerated")
        return settings

    def update_config(self, payload: Mapping[str, Any]) -> AttendanceConfig:
        fields = parse_config_fields(payload)
        if not fields:
            raise ValidationError("No config fields to update")
        self._save(fields)
        log_business_event("config_updated", "settings", constants.SETTINGS_DOC_ID, {"fields": sorted(fields)})
        config, _ = self.get_config()
        return config

    def set_debug_mode(self, enabled: bool) -> bool:
        """Persist the flag and return the stored value."""

        self._save({"debug_mode": require_bool(enabled, "enabled")})
        log_business_event("debug_mode_changed", "settings", constants.SETTINGS_DOC_ID, {"enabled": enabled})
        config, _ = self.get_config()
        return config.debug_mode

    def generate_code(self, *, now: Optional[datetime] = None) -> AttendanceSettings:
        now = now or now_local()
        fields = self._new_code_fields(now)
        self._save(fields)
        log_business_event("code_generated", "settings", constants.SETTINGS_DOC_ID)
        return apply_fields(self._settings.get() or AttendanceSettings(), fields)

    def set_code_enabled(self, enabled: bool, *, now: Optional[datetime] = None) -> AttendanceSettings:
        enabled = require_bool(enabled, "enabled")
        now = now or now_local()
        current = self._settings.get() or AttendanceSettings()

        if enabled and not current.has_live_code(now, self._code_ttl):
            fields = self._new_code_fields(now)
        else:
            fields = {"code_enabled": enabled}
        self._save(fields)
        log_business_event("code_toggled", "settings", constants.SETTINGS_DOC_ID, {"enabled": enabled})
        return apply_fields(current, fields)

    def clear_code(self) -> None:
        self._save({"verification_code": None, "code_enabled": False, "code_created_at": None})
        log_business_event("code_cleared", "settings", constants.SETTINGS_DOC_ID)

    def verify_code(self, settings: AttendanceSettings, supplied: Optional[str], *, now: datetime) -> None:
        """Raise InvalidCodeError unless codes are off or `supplied` matches the live code."""

        if not settings.code_enabled:
            return
        supplied = (supplied or "").strip()
        if not supplied:
            raise InvalidCodeError("Please enter the attendance verification code")
        if not settings.has_live_code(now, self._code_ttl) or not secrets.compare_digest(
            supplied, str(settings.verification_code)
        ):
            raise InvalidCodeError("Verification code is wrong or has expired")

    def _new_code_fields(self, now: datetime) -> Dict[str, Any]:
        return {"verification_code": self._generate_code(), "code_enabled": True, "code_created_at": now}

    def _save(self, fields: Mapping[str, Any]) -> None:
        if self._settings.update(fields):
            return
        try:
            self._settings.create(apply_fields(AttendanceSettings(), fields))
            logger.info("Attendance settings document created")
        except DuplicateRecordError:
            # Created concurrently by another request; apply our fields on top.
            self._settings.update(fields)
