from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .model import AttendanceSettings


class SettingsRepository(Protocol):
    """Storage of the attendance settings document.

    Field names passed to `update` are the `AttendanceConfig` /
    `AttendanceSettings` attribute names (e.g. `day_of_week`,
    `verification_code`). Only the given fields are written, so concurrent
    edits of different field groups do not overwrite each other.
    """

    def get(self) -> Optional[AttendanceSettings]:
        raise NotImplementedError

    def create(self, settings: AttendanceSettings) -> None:
        """Raises DuplicateRecordError if the document already exists."""

        raise NotImplementedError

    def update(self, fields: Mapping[str, Any]) -> bool:
        """Returns False when the document does not exist."""

        raise NotImplementedError
