from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for errors raised by the data-access layer."""


class ValidationError(DomainError):
    pass


class UnauthenticatedError(DomainError):
    """No active session. Always raised before the backend is touched."""


class BackendError(DomainError):
    """
    The backend reported a failure (constraint violation, unknown column,
    storage error). Carries the backend's code and message.
    """

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


ROW_NOT_FOUND = "row_not_found"


class NotFoundError(BackendError):
    """A single-row-expected request matched zero rows."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message, code=ROW_NOT_FOUND, details=details)
