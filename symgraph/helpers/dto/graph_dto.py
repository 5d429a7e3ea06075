"""
Dependency graph DTOs.

The graph is derived on demand from a repository snapshot and is never
persisted.

Rules:
- Import only stdlib and typing (no symgraph.* imports)
- Pure data structures only
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

EdgeKind = Literal["connection", "structural"]


@dataclass
class GraphNode:
    symbol_id: str
    name: str
    namespace: str
    level: str
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)


@dataclass
class GraphEdge:
    """
    Directed edge between two symbols.

    Connection edges carry the connection id and both port names. Structural
    edges point from a referenced type to the symbol whose port `to_port`
    references it.
    """

    from_symbol: str
    to_symbol: str
    connection_id: str | None = None
    from_port: str | None = None
    to_port: str | None = None
    kind: EdgeKind = "connection"


@dataclass
class DependencyGraph:
    """Nodes keyed by symbol id; edges grouped by source symbol id."""

    nodes: dict[str, GraphNode] = field(default_factory=dict)
    edges: dict[str, list[GraphEdge]] = field(default_factory=dict)
    cycles: list[list[str]] = field(default_factory=list)
    topological_order: list[str] | None = None

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self.edges.values())


@dataclass
class GraphStats:
    """Result from dependency_graph_service.get_stats."""

    node_count: int
    edge_count: int
    root_count: int
    leaf_count: int
    component_count: int
    has_cycles: bool
    max_depth: int


@dataclass
class DirectDependencies:
    """One-hop neighbours of a symbol."""

    upstream: list[str]
    downstream: list[str]
