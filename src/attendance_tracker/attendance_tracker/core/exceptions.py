from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404

    def __init__(self, message: str, *, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


class DuplicateError(DomainError):
    """Raised when a uniqueness rule rejects a write."""

    status_code = 409

    def __init__(self, message: str, *, fields: Optional[Sequence[str]] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.fields = list(fields or [])
        if status_code is not None:
            self.status_code = status_code
