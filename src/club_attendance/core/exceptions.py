from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400
    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    error_code = "VALIDATION_ERROR"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    error_code = "AUTHORIZATION_ERROR"


class NotFoundError(DomainError):
    status_code = 404
    error_code = "NOT_FOUND"


class AttendanceClosedError(DomainError):
    """Check-in attempted outside every open window."""

    error_code = "ATTENDANCE_CLOSED"


class AlreadyCheckedInError(DomainError):
    """The (student, session, week) record is already terminal."""

    status_code = 409
    error_code = "ALREADY_CHECKED_IN"

    def __init__(self, message: str, *, status: Optional[str] = None):
        super().__init__(message, {"status": status} if status else None)
        self.status = status

    @classmethod
    def for_session(cls, session_number: Optional[int], status: Optional[str]) -> "AlreadyCheckedInError":
        return cls(
            f"You already checked in for session {session_number} this week (status: {status or 'unknown'})",
            status=status,
        )


class InvalidCodeError(DomainError):
    """Missing, wrong or expired verification code."""

    error_code = "INVALID_CODE"

    def __init__(self, message: str):
        super().__init__(message, {"requireCode": True})


class DuplicateRecordError(DomainError):
    """A create collided with an existing unique key in the store."""

    status_code = 409
    error_code = "DUPLICATE_RECORD"

    def __init__(self, key: str):
        super().__init__(f"Record {key} already exists", {"key": key})
        self.key = key
