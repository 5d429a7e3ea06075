"""
Dependency graph construction and analysis.

Pure functions over a symbol/connection snapshot. Every traversal visits
nodes and successors in ascending symbol id order so results are
deterministic for an unchanged graph. Traversals are iterative, so deep
chains do not hit the recursion limit.

- Cycles: Tarjan's strongly connected components, O(V+E)
- Topological order: Kahn's algorithm with a min-heap tie-break, O((V+E) log V)
"""

from __future__ import annotations

import heapq
import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

from symgraph.components.symbol.symbol_query_comp import iter_type_ids
from symgraph.helpers.dto.connection_dto import Connection
from symgraph.helpers.dto.graph_dto import DependencyGraph, DirectDependencies, GraphEdge, GraphNode, GraphStats
from symgraph.helpers.dto.symbol_dto import ComponentSymbol

logger = logging.getLogger(__name__)

Adjacency = dict[str, list[str]]


# ----------------------------------------------------------------------
#  Construction
# ----------------------------------------------------------------------
def _node_for(symbol: ComponentSymbol) -> GraphNode:
    return GraphNode(
        symbol_id=symbol.id,
        name=symbol.name,
        namespace=symbol.namespace,
        level=symbol.level.value,
        inputs=[p.name for p in symbol.ports if p.is_input_capable],
        outputs=[p.name for p in symbol.ports if p.is_output_capable],
    )


def build_graph(
    symbols: Iterable[ComponentSymbol],
    connections: Iterable[Connection],
    include_structural: bool = False,
) -> DependencyGraph:
    """
    Build a dependency graph and analyse it.

    Args:
        symbols: Every symbol becomes a node
        connections: Each connection becomes an edge from -> to; connections
            whose endpoints are not among the symbols are skipped
        include_structural: Also add one edge per port type reference, from
            the referenced symbol to the referencing symbol

    Returns:
        DependencyGraph with cycles and topological_order populated
    """
    symbol_list = list(symbols)
    graph = DependencyGraph()
    for symbol in symbol_list:
        graph.nodes[symbol.id] = _node_for(symbol)
        graph.edges[symbol.id] = []

    for conn in connections:
        missing = [sid for sid in (conn.from_symbol_id, conn.to_symbol_id) if sid not in graph.nodes]
        if missing:
            logger.warning(f"[graph] Skipping connection {conn.id}: unknown symbol(s) {', '.join(missing)}")
            continue
        graph.edges[conn.from_symbol_id].append(
            GraphEdge(
                from_symbol=conn.from_symbol_id,
                to_symbol=conn.to_symbol_id,
                connection_id=conn.id,
                from_port=conn.from_port,
                to_port=conn.to_port,
            )
        )

    if include_structural:
        for symbol in symbol_list:
            for port in symbol.ports:
                # A type used twice in one port (Map<K, K>) is still one dependency
                for type_id in dict.fromkeys(iter_type_ids(port.type)):
                    # Self-typed ports (recursive types) are not dependencies
                    if type_id == symbol.id or type_id not in graph.nodes:
                        continue
                    graph.edges[type_id].append(
                        GraphEdge(from_symbol=type_id, to_symbol=symbol.id, to_port=port.name, kind="structural")
                    )

    return analyse(graph)


def analyse(graph: DependencyGraph) -> DependencyGraph:
    """Fill in cycles and topological_order from the current nodes and edges."""
    graph.cycles = detect_cycles(graph)
    graph.topological_order = topological_order(graph)
    return graph


def adjacency(graph: DependencyGraph) -> Adjacency:
    """Sorted, de-duplicated successor lists for every node."""
    adj: Adjacency = {node_id: [] for node_id in graph.nodes}
    for source, edges in graph.edges.items():
        if source not in adj:
            continue
        adj[source] = sorted({e.to_symbol for e in edges if e.to_symbol in graph.nodes})
    return adj


def reverse_adjacency(graph: DependencyGraph) -> Adjacency:
    preds: dict[str, set[str]] = {node_id: set() for node_id in graph.nodes}
    for source, targets in adjacency(graph).items():
        for target in targets:
            preds[target].add(source)
    return {node_id: sorted(p) for node_id, p in preds.items()}


# ----------------------------------------------------------------------
#  Cycles (Tarjan)
# ----------------------------------------------------------------------
def strongly_connected_components(graph: DependencyGraph) -> list[list[str]]:
    """All SCCs (including singletons) in the order Tarjan's algorithm completes them."""
    adj = adjacency(graph)
    index: dict[str, int] = {}
    low: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    components: list[list[str]] = []
    counter = 0

    for root in sorted(adj):
        if root in index:
            continue
        index[root] = low[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(adj[root]))]

        while work:
            node, successors = work[-1]
            descended = False
            for succ in successors:
                if succ not in index:
                    index[succ] = low[succ] = counter
                    counter += 1
                    stack.append(succ)
                    on_stack.add(succ)
                    work.append((succ, iter(adj[succ])))
                    descended = True
                    break
                if succ in on_stack:
                    low[node] = min(low[node], index[succ])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])

            if low[node] == index[node]:
                component: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)

    return components


def _discovery_order(members: set[str], adj: Adjacency) -> list[str]:
    """Preorder of a DFS restricted to one SCC, starting at its smallest id."""
    start = min(members)
    order: list[str] = []
    seen: set[str] = set()
    pending = [start]
    while pending:
        node = pending.pop()
        if node in seen:
            continue
        seen.add(node)
        order.append(node)
        # Reverse so the smallest successor is popped first
        pending.extend(s for s in reversed(adj[node]) if s in members and s not in seen)
    return order


def detect_cycles(graph: DependencyGraph) -> list[list[str]]:
    """
    Find every cycle in the graph.

    Each strongly connected component with more than one node, or a single
    node with a self-loop, is reported once. The closing edge is implicit:
    the last id links back to the first.

    Returns:
        Cycles sorted by first element; each listed in DFS discovery order
        from its smallest id
    """
    adj = adjacency(graph)
    cycles: list[list[str]] = []
    for component in strongly_connected_components(graph):
        if len(component) == 1 and component[0] not in adj[component[0]]:
            continue
        cycles.append(_discovery_order(set(component), adj))
    cycles.sort(key=lambda c: c[0])
    return cycles


def would_create_cycle(graph: DependencyGraph, from_id: str, to_id: str) -> bool:
    """True if adding an edge from_id -> to_id would close a cycle."""
    if from_id == to_id:
        return True
    if from_id not in graph.nodes or to_id not in graph.nodes:
        return False
    return from_id in _reachable(to_id, adjacency(graph))


# ----------------------------------------------------------------------
#  Ordering (Kahn)
# ----------------------------------------------------------------------
def topological_order(graph: DependencyGraph) -> list[str] | None:
    """
    Kahn's algorithm with ties broken by ascending symbol id.

    Returns:
        Ordered ids, or None when the graph contains a cycle
    """
    adj = adjacency(graph)
    in_degree = dict.fromkeys(adj, 0)
    for targets in adj.values():
        for target in targets:
            in_degree[target] += 1

    ready = [node_id for node_id, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    order: list[str] = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for succ in adj[node]:
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                heapq.heappush(ready, succ)

    if len(order) < len(adj):
        return None
    return order


# ----------------------------------------------------------------------
#  Traversal
# ----------------------------------------------------------------------
def _reachable(start: str, adj: Adjacency) -> set[str]:
    """Ids reachable from start by at least one edge (start only if on a cycle)."""
    seen: set[str] = set()
    queue = deque(adj.get(start, []))
    while queue:
        node = queue.popleft()
        if node in seen:
            continue
        seen.add(node)
        queue.extend(s for s in adj[node] if s not in seen)
    return seen


def get_downstream(graph: DependencyGraph, symbol_id: str) -> list[str]:
    """Every symbol reachable from symbol_id, excluding itself."""
    reached = _reachable(symbol_id, adjacency(graph))
    reached.discard(symbol_id)
    return sorted(reached)


def get_upstream(graph: DependencyGraph, symbol_id: str) -> list[str]:
    """Every symbol that can reach symbol_id, excluding itself."""
    reached = _reachable(symbol_id, reverse_adjacency(graph))
    reached.discard(symbol_id)
    return sorted(reached)


def get_direct(graph: DependencyGraph, symbol_id: str) -> DirectDependencies:
    return DirectDependencies(
        upstream=reverse_adjacency(graph).get(symbol_id, []),
        downstream=adjacency(graph).get(symbol_id, []),
    )


def get_root_nodes(graph: DependencyGraph) -> list[str]:
    """Nodes with no incoming edges."""
    return sorted(node_id for node_id, preds in reverse_adjacency(graph).items() if not preds)


def get_leaf_nodes(graph: DependencyGraph) -> list[str]:
    """Nodes with no outgoing edges."""
    return sorted(node_id for node_id, succs in adjacency(graph).items() if not succs)


def get_connected_components(graph: DependencyGraph) -> list[list[str]]:
    """Weakly connected components, each sorted, ordered by smallest id."""
    neighbours: dict[str, set[str]] = {node_id: set() for node_id in graph.nodes}
    for source, targets in adjacency(graph).items():
        for target in targets:
            neighbours[source].add(target)
            neighbours[target].add(source)

    components: list[list[str]] = []
    seen: set[str] = set()
    for start in sorted(neighbours):
        if start in seen:
            continue
        component: list[str] = []
        queue = deque([start])
        seen.add(start)
        while queue:
            node = queue.popleft()
            component.append(node)
            for other in neighbours[node]:
                if other not in seen:
                    seen.add(other)
                    queue.append(other)
        components.append(sorted(component))
    return components


def max_depth(graph: DependencyGraph) -> int:
    """
    Length in edges of the longest path.

    On cyclic graphs edges into nodes on the current DFS stack are ignored,
    which bounds the search.
    """
    adj = adjacency(graph)
    memo: dict[str, int] = {}

    for root in sorted(adj):
        if root in memo:
            continue
        best = {root: 0}
        on_stack = {root}
        work = [(root, iter(adj[root]))]
        while work:
            node, successors = work[-1]
            descended = False
            for succ in successors:
                if succ in on_stack:
                    continue
                if succ in memo:
                    best[node] = max(best[node], 1 + memo[succ])
                    continue
                best[succ] = 0
                on_stack.add(succ)
                work.append((succ, iter(adj[succ])))
                descended = True
                break
            if descended:
                continue
            work.pop()
            on_stack.discard(node)
            memo[node] = best.pop(node)
            if work:
                parent = work[-1][0]
                best[parent] = max(best[parent], 1 + memo[node])

    return max(memo.values(), default=0)


def compute_stats(graph: DependencyGraph) -> GraphStats:
    return GraphStats(
        node_count=len(graph.nodes),
        edge_count=graph.edge_count,
        root_count=len(get_root_nodes(graph)),
        leaf_count=len(get_leaf_nodes(graph)),
        component_count=len(get_connected_components(graph)),
        has_cycles=bool(detect_cycles(graph)),
        max_depth=max_depth(graph),
    )


def induced_subgraph(graph: DependencyGraph, root_id: str) -> DependencyGraph:
    """Root plus all its ancestors and descendants, with the edges among them."""
    keep = {root_id, *get_upstream(graph, root_id), *get_downstream(graph, root_id)}
    sub = DependencyGraph()
    for node_id in sorted(keep):
        sub.nodes[node_id] = graph.nodes[node_id]
        sub.edges[node_id] = [e for e in graph.edges.get(node_id, []) if e.to_symbol in keep]
    return analyse(sub)


# ----------------------------------------------------------------------
#  Serialization
# ----------------------------------------------------------------------
def graph_to_dto(graph: DependencyGraph) -> dict[str, Any]:
    """Flatten a graph into JSON-native lists (nodes, edges, order, cycles)."""
    return {
        "nodes": [asdict(n) for n in graph.nodes.values()],
        "edges": [asdict(e) for edges in graph.edges.values() for e in edges],
        "topological_order": graph.topological_order,
        "cycles": graph.cycles,
    }


def dto_to_graph(data: dict[str, Any]) -> DependencyGraph:
    """Inverse of graph_to_dto."""
    graph = DependencyGraph(
        cycles=[list(c) for c in data.get("cycles", [])],
        topological_order=data.get("topological_order"),
    )
    for node in data.get("nodes", []):
        graph.nodes[node["symbol_id"]] = GraphNode(**node)
        graph.edges.setdefault(node["symbol_id"], [])
    for edge in data.get("edges", []):
        graph.edges.setdefault(edge["from_symbol"], []).append(GraphEdge(**edge))
    return graph
