"""
Port compatibility DTOs.

Rules:
- Import only stdlib and typing (no symgraph.* imports)
- Pure data structures only
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeCompatibilityMode(str, Enum):
    """How strictly port types are compared."""

    # Same symbol id, nullability and generic arguments
    STRICT = "strict"
    # Allows defaulted generics, null widening and built-in numeric widening
    COMPATIBLE = "compatible"


@dataclass
class CompatibilityResult:
    """
    Result of checking whether an output port may feed an input port.

    `score` (0-100) ranks compatible candidates; it never decides acceptance.
    """

    compatible: bool
    reason: str | None = None
    suggestions: list[str] = field(default_factory=list)
    score: int = 0
