"""
API response types package.

External API contracts organized by domain.
Each module defines Pydantic models with .from_dto() transformation methods.
"""

from symgraph.interfaces.api.types.common_types import ApiError, ApiResponse
from symgraph.interfaces.api.types.graph_types import (
    CyclesResponse,
    DependencyGraphResponse,
    GraphEdgeModel,
    GraphNodeModel,
    GraphStatsResponse,
    TopologicalOrderResponse,
)
from symgraph.interfaces.api.types.symbol_types import (
    PortModel,
    RegisterSymbolRequest,
    SymbolListResponse,
    SymbolQueryRequest,
    SymbolResponse,
    TypeReferenceModel,
)
from symgraph.interfaces.api.types.wiring_types import (
    CompatiblePortResponse,
    ConnectionResponse,
    ConnectRequest,
    UnconnectedPortResponse,
    ValidationIssueModel,
    ValidationResponse,
    WiringResponse,
)

__all__ = [
    "ApiError",
    "ApiResponse",
    "CompatiblePortResponse",
    "ConnectRequest",
    "ConnectionResponse",
    "CyclesResponse",
    "DependencyGraphResponse",
    "GraphEdgeModel",
    "GraphNodeModel",
    "GraphStatsResponse",
    "PortModel",
    "RegisterSymbolRequest",
    "SymbolListResponse",
    "SymbolQueryRequest",
    "SymbolResponse",
    "TopologicalOrderResponse",
    "TypeReferenceModel",
    "UnconnectedPortResponse",
    "ValidationIssueModel",
    "ValidationResponse",
    "WiringResponse",
]
