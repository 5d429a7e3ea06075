"""
Connection and wiring DTOs.

Cross-layer contracts for wiring operations (wiring service, repository,
API facade).

Rules:
- Import only stdlib and typing (no symgraph.* imports)
- Pure data structures only (no I/O, no DB access, no business logic)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass
class Connection:
    """Persisted wiring from an output-capable port to an input-capable port."""

    id: str
    from_symbol_id: str
    from_port: str
    to_symbol_id: str
    to_port: str
    transform: str | None = None
    created_at: int = 0


@dataclass
class ConnectionRequest:
    """Request to connect `from_symbol_id.from_port` to `to_symbol_id.to_port`."""

    from_symbol_id: str
    from_port: str
    to_symbol_id: str
    to_port: str
    transform: str | None = None


@dataclass
class WiringResult:
    """Result from wiring_service.connect / disconnect."""

    success: bool
    connection_id: str | None = None
    error: str | None = None
    error_code: str | None = None


@dataclass
class ValidationIssue:
    code: str
    message: str
    symbol_ids: list[str]
    severity: Literal["error", "warning"] = "error"


@dataclass
class ValidationResult:
    """Outcome of a validation pass; `valid` is False when any error was recorded."""

    valid: bool = True
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)


@dataclass
class CompatiblePort:
    """Result row from wiring_service.find_compatible_ports."""

    symbol_id: str
    port_name: str
    score: int


@dataclass
class UnconnectedPort:
    """Result row from wiring_service.find_unconnected_required_ports."""

    symbol_id: str
    port_name: str
    port_direction: str
