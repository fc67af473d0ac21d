from __future__ import annotations

import re
from dataclasses import dataclass

_NUMERIC_LOCAL_PART = re.compile(r"^(\d+)@")


@dataclass(frozen=True)
class Student:
    """Roster entry; `student_id` is the stable id used in ledger keys, not the row id."""

    id: str
    student_id: str
    name: str
    email: str


def student_id_from_email(email: str) -> str:
    """`12345@school.edu` -> `12345`; otherwise the whole local part."""

    email = (email or "").strip()
    match = _NUMERIC_LOCAL_PART.match(email)
    if match:
        return match.group(1)
    return email.split("@")[0]
