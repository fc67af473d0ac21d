from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.initializer import SessionInitializer
from .attendance.ledger import AttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reports import AttendanceReportService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sweeper import Sweeper
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .roster.mysql_roster_repository import MySQLRosterProvider
from .roster.repository import RosterProvider
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    settings_repo: SettingsRepository
    attendance_repo: AttendanceRepository
    roster: RosterProvider

    settings_service: SettingsService
    ledger: AttendanceLedger
    attendance_service: AttendanceService
    initializer: SessionInitializer
    sweeper: Sweeper
    report_service: AttendanceReportService


def build_services(
    *,
    settings_repo: SettingsRepository,
    attendance_repo: AttendanceRepository,
    roster: RosterProvider,
    code_ttl_minutes: int = constants.DEFAULT_CODE_TTL_MINUTES,
    tolerance_minutes: int = constants.DEFAULT_LEGACY_TOLERANCE_MINUTES,
) -> Container:
    factory = AttendanceStrategyFactory()
    settings_service = SettingsService(settings_repo, code_ttl_minutes=code_ttl_minutes)
    ledger = AttendanceLedger(attendance_repo)

    return Container(
        settings_repo=settings_repo,
        attendance_repo=attendance_repo,
        roster=roster,
        settings_service=settings_service,
        ledger=ledger,
        attendance_service=AttendanceService(ledger, settings_service, roster, strategy_factory=factory),
        initializer=SessionInitializer(ledger, roster, settings_service, tolerance_minutes=tolerance_minutes),
        sweeper=Sweeper(
            ledger, roster, settings_service, strategy_factory=factory, tolerance_minutes=tolerance_minutes
        ),
        report_service=AttendanceReportService(ledger, roster, settings_service, tolerance_minutes=tolerance_minutes),
    )


def build_container(
    *,
    db_config: dict,
    code_ttl_minutes: int = constants.DEFAULT_CODE_TTL_MINUTES,
    roster_limit: int = constants.DEFAULT_ROSTER_LIMIT,
    tolerance_minutes: int = constants.DEFAULT_LEGACY_TOLERANCE_MINUTES,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        settings_repo=MySQLSettingsRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        roster=MySQLRosterProvider(conn, limit=roster_limit),
        code_ttl_minutes=code_ttl_minutes,
        tolerance_minutes=tolerance_minutes,
    )
