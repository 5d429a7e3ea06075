"""
Config domain DTOs.

Data transfer objects for configuration service results.

Rules:
- Import only stdlib and typing (no symgraph.* imports)
- Pure data structures only (no I/O, no DB access, no business logic)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass
class EngineConfig:
    """
    Validated settings used to assemble the Application.

    type_mode holds the string value of TypeCompatibilityMode.
    """

    repository: Literal["memory", "sqlite"]
    db_path: str
    type_mode: str
    check_cardinality: bool
    reject_cycles: bool
    include_structural_edges: bool
    log_level: str
