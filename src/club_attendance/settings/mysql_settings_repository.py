from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import SETTINGS_DOC_ID
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import AttendanceConfig, AttendanceSettings, SessionStart
from .repository import SettingsRepository

_COLUMNS = {
    "day_of_week": "day_of_week",
    "session1_start": "session1_start",
    "session1_duration": "session1_duration",
    "session2_start": "session2_start",
    "session2_duration": "session2_duration",
    "week_start_date": "week_start_date",
    "debug_mode": "debug_mode",
    "verification_code": "verification_code",
    "code_enabled": "code_enabled",
    "code_created_at": "code_created_at",
}


def _to_column_value(value: Any) -> Any:
    if isinstance(value, SessionStart):
        return value.label
    if isinstance(value, bool):
        return int(value)
    return value


def _parse_start(value: Any) -> SessionStart:
    parsed = parse_hhmm(str(value))
    if parsed is None:
        raise ValueError(f"Invalid session start in club_settings: {value!r}")
    return SessionStart(*parsed)


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT day_of_week, session1_start, session1_duration, session2_start, session2_duration,
                       week_start_date, debug_mode, verification_code, code_enabled, code_created_at
                FROM club_settings
                WHERE doc_id=%s
                """,
                (SETTINGS_DOC_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceSettings(
                config=AttendanceConfig(
                    day_of_week=int(r["day_of_week"]),
                    session1_start=_parse_start(r["session1_start"]),
                    session1_duration=int(r["session1_duration"]),
                    session2_start=_parse_start(r["session2_start"]),
                    session2_duration=int(r["session2_duration"]),
                    week_start_date=r["week_start_date"],
                    debug_mode=bool(r.get("debug_mode")),
                ),
                verification_code=r.get("verification_code"),
                code_enabled=bool(r.get("code_enabled")),
                code_created_at=r.get("code_created_at"),
            )

    def create(self, settings: AttendanceSettings) -> None:
        c = settings.config
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO club_settings(
                        doc_id, day_of_week, session1_start, session1_duration, session2_start,
                        session2_duration, week_start_date, debug_mode, verification_code,
                        code_enabled, code_created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        SETTINGS_DOC_ID,
                        c.day_of_week,
                        c.session1_start.label,
                        c.session1_duration,
                        c.session2_start.label,
                        c.session2_duration,
                        c.week_start_date,
                        int(c.debug_mode),
                        settings.verification_code,
                        int(settings.code_enabled),
                        settings.code_created_at,
                    ),
                )
        except Exception as exc:
            if is_duplicate_key(exc):
                raise DuplicateRecordError(SETTINGS_DOC_ID) from exc
            raise

    def update(self, fields: Mapping[str, Any]) -> bool:
        if not fields:
            return self.get() is not None

        unknown = set(fields) - set(_COLUMNS)
        if unknown:
            raise KeyError(f"Unknown settings fields: {sorted(unknown)}")

        assignments = ", ".join(f"{_COLUMNS[name]}=%s" for name in fields)
        params = [_to_column_value(v) for v in fields.values()]
        params.append(SETTINGS_DOC_ID)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT doc_id FROM club_settings WHERE doc_id=%s", (SETTINGS_DOC_ID,))
            if not fetchone(cur):
                return False
            cur.execute(f"UPDATE club_settings SET {assignments} WHERE doc_id=%s", tuple(params))
            return True
