"""
Graph API types.

External contracts for dependency graph export and analysis results.
"""

from __future__ import annotations

from pydantic import BaseModel
from typing_extensions import Self

from symgraph.components.graph.graph_algorithms_comp import graph_to_dto
from symgraph.helpers.dto.graph_dto import DependencyGraph, EdgeKind, GraphStats


class GraphNodeModel(BaseModel):
    symbol_id: str
    name: str
    namespace: str
    level: str
    inputs: list[str]
    outputs: list[str]


class GraphEdgeModel(BaseModel):
    from_symbol: str
    to_symbol: str
    connection_id: str | None = None
    from_port: str | None = None
    to_port: str | None = None
    kind: EdgeKind = "connection"


class DependencyGraphResponse(BaseModel):
    """Flattened graph: node list, edge list, ordering and cycles."""

    nodes: list[GraphNodeModel]
    edges: list[GraphEdgeModel]
    topological_order: list[str] | None
    cycles: list[list[str]]

    @classmethod
    def from_dto(cls, graph: DependencyGraph) -> Self:
        return cls.model_validate(graph_to_dto(graph))


class CyclesResponse(BaseModel):
    cycles: list[list[str]]
    has_cycles: bool

    @classmethod
    def from_dto(cls, cycles: list[list[str]]) -> Self:
        return cls(cycles=cycles, has_cycles=bool(cycles))


class TopologicalOrderResponse(BaseModel):
    """`order` is None when the graph has cycles."""

    order: list[str] | None
    has_order: bool

    @classmethod
    def from_dto(cls, order: list[str] | None) -> Self:
        return cls(order=order, has_order=order is not None)


class GraphStatsResponse(BaseModel):
    node_count: int
    edge_count: int
    root_count: int
    leaf_count: int
    component_count: int
    has_cycles: bool
    max_depth: int

    @classmethod
    def from_dto(cls, stats: GraphStats) -> Self:
        return cls(
            node_count=stats.node_count,
            edge_count=stats.edge_count,
            root_count=stats.root_count,
            leaf_count=stats.leaf_count,
            component_count=stats.component_count,
            has_cycles=stats.has_cycles,
            max_depth=stats.max_depth,
        )
