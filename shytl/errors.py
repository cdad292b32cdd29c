"""
Errors - Structured failures raised by the session layer.

Every request-level failure is a ShytlError subclass carrying:
- A human-readable message
- A machine-readable ErrorCode
- Optional details (offending field, reducer error code, ...)

The HTTP layer maps each code to a status; nothing here knows about HTTP.
"""

from __future__ import annotations
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Structured error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ShytlError(Exception):
    """Base class for recoverable, reportable request failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(ShytlError):
    """Malformed input. `field` names the offending parameter."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, details={"field": field})


class UnauthorizedError(ShytlError):
    """Session key missing, unknown, or not a member of the game."""

    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(ShytlError):
    """Authenticated, but not permitted (wrong turn, not host)."""

    code = ErrorCode.FORBIDDEN


class NotFoundError(ShytlError):
    """Referenced game or player does not exist."""

    code = ErrorCode.NOT_FOUND


class ConflictError(ShytlError):
    """The state machine rejected the event."""

    code = ErrorCode.CONFLICT

    def __init__(self, message: str, error_code: str | None = None):
        self.error_code = error_code
        super().__init__(message, details={"reason": error_code} if error_code else None)


class TransientStorageError(ShytlError):
    """Persistence backend unavailable or transaction failed. Safe to retry."""

    code = ErrorCode.STORAGE_UNAVAILABLE
