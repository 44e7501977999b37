from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a field is missing/malformed or a time rule is violated."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class ConflictError(DomainError):
    """Raised when the operation does not fit the current session state."""


class NotFoundError(DomainError):
    """Raised when a referenced session or child does not exist."""


class UnauthenticatedError(DomainError):
    """Raised when a mutating operation has no caller identity."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StoreUnavailableError(DomainError):
    """Raised when the database could not be reached or failed mid-operation."""


class IntegrityError(DomainError):
    """Raised when more than one open session exists for the same child."""

    def __init__(self, child_id: str, session_ids: Sequence[str]):
        super().__init__(f"Child {child_id} has {len(session_ids)} open sessions: {', '.join(session_ids)}")
        self.child_id = child_id
        self.session_ids = list(session_ids)
