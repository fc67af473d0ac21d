from __future__ import annotations

import logging
from typing import Sequence

from ..core.constants import DEFAULT_ROSTER_LIMIT
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Student, student_id_from_email
from .repository import RosterProvider

logger = logging.getLogger(__name__)


class MySQLRosterProvider(RosterProvider):
    def __init__(self, conn_factory: DatabaseConnection, *, limit: int = DEFAULT_ROSTER_LIMIT):
        self._conn_factory = conn_factory
        self._limit = int(limit)

    def list_active_students(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, name, email
                FROM users
                WHERE role=%s AND is_active=1
                ORDER BY id ASC
                LIMIT %s
                """,
                (Role.STUDENT.value, self._limit),
            )
            rows = fetchall(cur)

        students = []
        for r in rows:
            email = str(r.get("email") or "")
            student_id = str(r["student_id"]) if r.get("student_id") else student_id_from_email(email)
            if not student_id:
                logger.warning("Skipping roster row %s without student id or email", r.get("id"))
                continue
            students.append(
                Student(
                    id=str(r["id"]),
                    student_id=student_id,
                    name=str(r.get("name") or email),
                    email=email,
                )
            )
        return students
