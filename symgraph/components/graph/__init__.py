"""
Graph package.
"""

from .graph_algorithms_comp import (
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
    max_depth,
    topological_order,
    would_create_cycle,
)

__all__ = [
    "build_graph",
    "compute_stats",
    "detect_cycles",
    "get_connected_components",
    "get_direct",
    "get_downstream",
    "get_leaf_nodes",
    "get_root_nodes",
    "get_upstream",
    "graph_to_dto",
    "induced_subgraph",
    "max_depth",
    "topological_order",
    "would_create_cycle",
]
