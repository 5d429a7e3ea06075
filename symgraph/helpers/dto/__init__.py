"""
Domain-specific DTOs (Data Transfer Objects) used across multiple layers.

Domain-specific DTOs live in helpers/dto/<domain>_dto.py and form cross-layer contracts
within that domain (interfaces → services → components → persistence).

Rules for DTO modules:
- Import only stdlib and typing (no symgraph.* imports)
- Contain ONLY dataclass/type definitions and simple type aliases
- No I/O, no DB access, no business logic
- Pure data structures with optional simple properties
"""

from .compatibility_dto import CompatibilityResult, TypeCompatibilityMode
from .config_dto import EngineConfig
from .connection_dto import (
    CompatiblePort,
    Connection,
    ConnectionRequest,
    UnconnectedPort,
    ValidationIssue,
    ValidationResult,
    WiringResult,
)
from .graph_dto import DependencyGraph, DirectDependencies, GraphEdge, GraphNode, GraphStats
from .symbol_dto import (
    KIND_TO_LEVEL,
    MAX_TYPE_DEPTH,
    AbstractionLevel,
    ComponentKind,
    ComponentQuery,
    ComponentSymbol,
    GenerationMetadata,
    ImportSymbolsResult,
    PortDefinition,
    PortDirection,
    SemVer,
    SourceLocation,
    StatusInfo,
    SymbolOrigin,
    SymbolStatus,
    TypeReference,
    VersionRange,
)

__all__ = [
    "KIND_TO_LEVEL",
    "MAX_TYPE_DEPTH",
    "AbstractionLevel",
    "CompatibilityResult",
    "CompatiblePort",
    "ComponentKind",
    "ComponentQuery",
    "ComponentSymbol",
    "Connection",
    "ConnectionRequest",
    "DependencyGraph",
    "DirectDependencies",
    "EngineConfig",
    "GenerationMetadata",
    "GraphEdge",
    "GraphNode",
    "GraphStats",
    "ImportSymbolsResult",
    "PortDefinition",
    "PortDirection",
    "SemVer",
    "SourceLocation",
    "StatusInfo",
    "SymbolOrigin",
    "SymbolStatus",
    "TypeCompatibilityMode",
    "TypeReference",
    "UnconnectedPort",
    "ValidationIssue",
    "ValidationResult",
    "VersionRange",
    "WiringResult",
]
