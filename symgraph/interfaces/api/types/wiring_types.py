"""
Wiring API types.

External contracts for connect/disconnect, validation results and port
discovery. Thin adapters around DTOs from helpers/dto/connection_dto.py.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Literal

from pydantic import BaseModel
from typing_extensions import Self

from symgraph.helpers.dto.connection_dto import (
    CompatiblePort,
    Connection,
    ConnectionRequest,
    UnconnectedPort,
    ValidationIssue,
    ValidationResult,
    WiringResult,
)

# ──────────────────────────────────────────────────────────────────────
# Requests
# ──────────────────────────────────────────────────────────────────────


class ConnectRequest(BaseModel):
    from_symbol_id: str
    from_port: str
    to_symbol_id: str
    to_port: str
    transform: str | None = None

    def to_dto(self) -> ConnectionRequest:
        return ConnectionRequest(**self.model_dump())


# ──────────────────────────────────────────────────────────────────────
# Responses
# ──────────────────────────────────────────────────────────────────────


class WiringResponse(BaseModel):
    connection_id: str | None

    @classmethod
    def from_dto(cls, result: WiringResult) -> Self:
        return cls(connection_id=result.connection_id)


class ConnectionResponse(BaseModel):
    id: str
    from_symbol_id: str
    from_port: str
    to_symbol_id: str
    to_port: str
    transform: str | None = None
    created_at: int

    @classmethod
    def from_dto(cls, conn: Connection) -> Self:
        return cls(**asdict(conn))


class ValidationIssueModel(BaseModel):
    code: str
    message: str
    symbol_ids: list[str]
    severity: Literal["error", "warning"]

    @classmethod
    def from_dto(cls, issue: ValidationIssue) -> Self:
        return cls(**asdict(issue))


class ValidationResponse(BaseModel):
    valid: bool
    errors: list[ValidationIssueModel]
    warnings: list[ValidationIssueModel]

    @classmethod
    def from_dto(cls, result: ValidationResult) -> Self:
        return cls(
            valid=result.valid,
            errors=[ValidationIssueModel.from_dto(i) for i in result.errors],
            warnings=[ValidationIssueModel.from_dto(i) for i in result.warnings],
        )


class CompatiblePortResponse(BaseModel):
    symbol_id: str
    port_name: str
    score: int

    @classmethod
    def from_dto(cls, port: CompatiblePort) -> Self:
        return cls(**asdict(port))


class UnconnectedPortResponse(BaseModel):
    symbol_id: str
    port_name: str
    port_direction: str

    @classmethod
    def from_dto(cls, port: UnconnectedPort) -> Self:
        return cls(**asdict(port))
