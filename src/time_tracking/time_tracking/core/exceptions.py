from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a user-facing default message so controllers can
    hand ``str(exc)`` straight to the UI.
    """

    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class InvalidCredential(DomainError):
    default_message = "Invalid PIN"


class UserDisabled(DomainError):
    default_message = "User is disabled"


class ShiftAlreadyOpen(DomainError):
    default_message = "You already have an active shift. Clock out first."


class NoOpenShift(DomainError):
    default_message = "No active shift found. Clock in first."


class EntryNotFound(DomainError):
    default_message = "Time entry not found"


class ValidationError(DomainError):
    """Raised when input data is invalid (PIN format, hours, names...)."""

    default_message = "Invalid input"


class NotAuthorized(DomainError):
    default_message = "Not authorized"


class NotFound(DomainError):
    default_message = "User not found"
