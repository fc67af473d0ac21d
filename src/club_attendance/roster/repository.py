from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student


class RosterProvider(Protocol):
    def list_active_students(self) -> Sequence[Student]:
        """Snapshot of every active student (role-filtered)."""

        raise NotImplementedError
