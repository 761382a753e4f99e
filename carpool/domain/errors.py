"""
Error taxonomy shared by every workflow.

Each error carries a stable, user-facing ``message`` and the HTTP status the
API layer renders it with.  Services raise them at the first violated
precondition, before touching any entity.
"""

from __future__ import annotations


class DomainError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or out-of-range input."""

    status_code = 400


class Unauthenticated(DomainError):
    status_code = 401


class Forbidden(DomainError):
    """Caller is authenticated but does not own the entity."""

    status_code = 403


class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    """State-machine precondition violated (status, seats, duplicates, time)."""

    status_code = 400


class InvalidStateTransition(Conflict):
    """Raised when a reservation status change violates the state machine."""


class Unexpected(DomainError):
    status_code = 500
