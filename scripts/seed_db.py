from __future__ import annotations

import importlib

from config import get_settings_module

from club_attendance.database.bootstrap import ensure_demo_students
from club_attendance.database.connection import DBConfig, DatabaseConnection
from club_attendance.settings.model import AttendanceSettings
from club_attendance.settings.mysql_settings_repository import MySQLSettingsRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    added = ensure_demo_students(db_config)

    repo = MySQLSettingsRepository(DatabaseConnection.get_instance(DBConfig(**db_config)))
    if repo.get() is None:
        repo.create(AttendanceSettings())
        print("OK: Default attendance config created")

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(students added={added})"
    )


if __name__ == "__main__":
    main()
