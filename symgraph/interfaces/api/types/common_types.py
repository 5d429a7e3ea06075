"""
Common API envelope types.

Every facade call returns an ApiResponse: either success with a payload in
`data`, or failure with an ApiError carrying a stable ErrorCode value.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import Self


class ApiError(BaseModel):
    """Error payload for failed calls."""

    code: str = Field(..., description="Stable error code (ErrorCode value)")
    message: str = Field(..., description="Human-readable error message")
    details: list[str] = Field(default_factory=list, description="Individual validation failures, if any")


class ApiResponse(BaseModel):
    """Uniform result envelope: {success, data} or {success: false, error}."""

    success: bool
    data: Any = None
    error: ApiError | None = None

    @classmethod
    def ok(cls, data: Any = None) -> Self:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: str, message: str, details: list[str] | None = None) -> Self:
        return cls(success=False, error=ApiError(code=code, message=message, details=details or []))
