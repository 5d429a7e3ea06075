"""Custom exceptions used across multiple layers.

Rules:
- Only put exceptions here if they need to be raised in one layer and caught in another.
- Keep exceptions simple and focused.
- No I/O, no config loading, no complex logic.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes shared by services, wiring results and the API facade."""

    NOT_FOUND = "NOT_FOUND"
    PORT_NOT_FOUND = "PORT_NOT_FOUND"
    INVALID_CONSTRAINT = "INVALID_CONSTRAINT"
    INCOMPATIBLE_PORTS = "INCOMPATIBLE_PORTS"
    CARDINALITY_VIOLATION = "CARDINALITY_VIOLATION"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SELF_CONNECTION = "SELF_CONNECTION"
    DUPLICATE_CONNECTION = "DUPLICATE_CONNECTION"
    WOULD_CREATE_CYCLE = "WOULD_CREATE_CYCLE"


class SymbolGraphError(Exception):
    """Base class for domain errors; carries the ErrorCode reported to callers."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SymbolGraphError):
    """Raised when a symbol, port or connection does not exist."""

    code = ErrorCode.NOT_FOUND


class InvalidConstraintError(SymbolGraphError, ValueError):
    """Raised when a version constraint string cannot be parsed."""

    code = ErrorCode.INVALID_CONSTRAINT


class ValidationFailedError(SymbolGraphError):
    """Raised when a symbol would violate a symbol-table invariant."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]
