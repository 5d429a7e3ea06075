"""Dependency graph service - on-demand graph analysis over the repository.

Stateless: every call takes a fresh snapshot (symbols + connections) from
the repository and runs the graph algorithms on it. Nothing is cached or
persisted, so results always reflect the current wiring.
"""

from __future__ import annotations

import logging
from typing import Any

from symgraph.components.graph.graph_algorithms_comp import (
    build_graph,
    compute_stats,
    detect_cycles,
    get_connected_components,
    get_direct,
    get_downstream,
    get_leaf_nodes,
    get_root_nodes,
    get_upstream,
    graph_to_dto,
    induced_subgraph,
    would_create_cycle,
)
from symgraph.helpers.dto.graph_dto import DependencyGraph, DirectDependencies, GraphStats
from symgraph.helpers.exceptions import NotFoundError
from symgraph.persistence.symbol_repository import SymbolRepository

logger = logging.getLogger(__name__)


class DependencyGraphService:
    """Builds and queries the dependency graph derived from connections."""

    def __init__(self, repo: SymbolRepository, include_structural: bool = False):
        """
        Args:
            repo: Source of symbols and connections
            include_structural: Default for adding port-type reference edges
        """
        self.repo = repo
        self.include_structural = include_structural

    def build_graph(self, include_structural: bool | None = None) -> DependencyGraph:
        structural = self.include_structural if include_structural is None else include_structural
        graph = build_graph(self.repo.list(), self.repo.find_all_connections(), include_structural=structural)
        logger.debug(
            f"[dependency_graph] Built graph: {len(graph.nodes)} nodes, {graph.edge_count} edges, "
            f"{len(graph.cycles)} cycle(s)"
        )
        return graph

    def _graph_with(self, symbol_id: str) -> DependencyGraph:
        graph = self.build_graph()
        if symbol_id not in graph.nodes:
            raise NotFoundError(f"Symbol not found: {symbol_id}")
        return graph

    def build_subgraph(self, root_id: str) -> DependencyGraph:
        """
        Ancestors and descendants of root_id with the edges among them.

        Raises:
            NotFoundError: If root_id is not a registered symbol
        """
        return induced_subgraph(self._graph_with(root_id), root_id)

    def detect_cycles(self) -> list[list[str]]:
        return detect_cycles(self.build_graph())

    def get_topological_order(self) -> list[str] | None:
        """Ordered ids, or None when the graph has cycles (not an error)."""
        return self.build_graph().topological_order

    def get_stats(self) -> GraphStats:
        return compute_stats(self.build_graph())

    def would_create_cycle(self, from_id: str, to_id: str) -> bool:
        return would_create_cycle(self.build_graph(), from_id, to_id)

    def get_upstream(self, symbol_id: str) -> list[str]:
        return get_upstream(self._graph_with(symbol_id), symbol_id)

    def get_downstream(self, symbol_id: str) -> list[str]:
        return get_downstream(self._graph_with(symbol_id), symbol_id)

    def get_direct(self, symbol_id: str) -> DirectDependencies:
        return get_direct(self._graph_with(symbol_id), symbol_id)

    def get_root_nodes(self) -> list[str]:
        return get_root_nodes(self.build_graph())

    def get_leaf_nodes(self) -> list[str]:
        return get_leaf_nodes(self.build_graph())

    def get_connected_components(self) -> list[list[str]]:
        return get_connected_components(self.build_graph())

    def export_graph(self) -> dict[str, Any]:
        """Current graph flattened by graph_to_dto."""
        return graph_to_dto(self.build_graph())
