"""
Helpers package.
"""

from .exceptions import (
    ErrorCode,
    InvalidConstraintError,
    NotFoundError,
    SymbolGraphError,
    ValidationFailedError,
)
from .logging_helper import configure_logging, sanitize_exception_message
from .time_helper import now_ms

__all__ = [
    "ErrorCode",
    "InvalidConstraintError",
    "NotFoundError",
    "SymbolGraphError",
    "ValidationFailedError",
    "configure_logging",
    "now_ms",
    "sanitize_exception_message",
]
