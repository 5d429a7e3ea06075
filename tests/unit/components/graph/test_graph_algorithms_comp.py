"""
Unit tests for symgraph.components.graph.graph_algorithms_comp module.

Graphs are built from real symbols and connections; ids take the form
app/<Name>@1.0.0 so ascending id order equals ascending name order.
"""

import random

import pytest

from symgraph.components.graph.graph_algorithms_comp import (
    build_graph,
    compute_stats,
    detect_cycles,
    dto_to_graph,
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
from symgraph.helpers.dto.connection_dto import Connection
from symgraph.helpers.dto.symbol_dto import ComponentKind, PortDirection
from tests.factories import make_port, make_symbol, pipe_symbol, type_symbol


def sid(name: str) -> str:
    return f"app/{name}@1.0.0"


def graph_of(names: str, edges: list[tuple[str, str]], shuffle_seed: int | None = None):
    """Build a graph of pipe symbols named by the letters in `names`."""
    symbols = [pipe_symbol(n) for n in names]
    connections = [
        Connection(id=f"c{i}", from_symbol_id=sid(a), from_port="out", to_symbol_id=sid(b), to_port="in")
        for i, (a, b) in enumerate(edges)
    ]
    if shuffle_seed is not None:
        rng = random.Random(shuffle_seed)
        rng.shuffle(symbols)
        rng.shuffle(connections)
    return build_graph(symbols, connections)


class TestBuildGraph:
    """Tests for build_graph."""

    @pytest.mark.unit
    def test_nodes_and_edges(self) -> None:
        """Every symbol should be a node and every connection an edge."""
        graph = graph_of("AB", [("A", "B")])
        assert set(graph.nodes) == {sid("A"), sid("B")}
        assert graph.edge_count == 1
        edge = graph.edges[sid("A")][0]
        assert (edge.to_symbol, edge.connection_id, edge.from_port, edge.to_port) == (sid("B"), "c0", "out", "in")
        assert graph.nodes[sid("A")].inputs == ["in"]
        assert graph.nodes[sid("A")].outputs == ["out"]

    @pytest.mark.unit
    def test_unknown_endpoint_skipped(self) -> None:
        """Connections to symbols outside the snapshot should be skipped."""
        conn = Connection(id="x", from_symbol_id=sid("A"), from_port="out", to_symbol_id=sid("Gone"), to_port="in")
        graph = build_graph([pipe_symbol("A")], [conn])
        assert graph.edge_count == 0

    @pytest.mark.unit
    def test_structural_edges(self) -> None:
        """Structural edges should run from a referenced type to the symbol using it."""
        user = type_symbol("User", namespace="app")
        consumer = make_symbol("Consumer", ports=[make_port("u", PortDirection.IN, user.id)])
        node = make_symbol("Node", ComponentKind.TYPE, ports=[make_port("next", PortDirection.OUT, sid("Node"))])

        plain = build_graph([user, consumer, node], [])
        assert plain.edge_count == 0

        graph = build_graph([user, consumer, node], [], include_structural=True)
        assert graph.edge_count == 1
        edge = graph.edges[user.id][0]
        assert (edge.to_symbol, edge.to_port, edge.kind) == (consumer.id, "u", "structural")


class TestDetectCycles:
    """Tests for detect_cycles and its agreement with topological_order."""

    @pytest.mark.unit
    def test_three_node_cycle(self) -> None:
        """X -> Y -> Z -> X should give exactly one cycle [X, Y, Z] and no order."""
        graph = graph_of("XYZ", [("X", "Y"), ("Y", "Z"), ("Z", "X")])
        assert detect_cycles(graph) == [[sid("X"), sid("Y"), sid("Z")]]
        assert topological_order(graph) is None
        assert compute_stats(graph).has_cycles is True

    @pytest.mark.unit
    def test_self_loop_is_cycle(self) -> None:
        """A single node with an edge to itself should be reported."""
        graph = graph_of("A", [("A", "A")])
        assert detect_cycles(graph) == [[sid("A")]]

    @pytest.mark.unit
    def test_multiple_cycles_sorted(self) -> None:
        """Independent cycles should be listed by their first id."""
        graph = graph_of("ABCDE", [("D", "E"), ("E", "D"), ("A", "B"), ("B", "A"), ("B", "C")])
        assert detect_cycles(graph) == [[sid("A"), sid("B")], [sid("D"), sid("E")]]

    @pytest.mark.unit
    def test_content_stable_across_input_order(self) -> None:
        """Re-running on the same graph built in another order should give the same cycles."""
        edges = [("A", "B"), ("B", "C"), ("C", "A"), ("C", "D"), ("D", "E"), ("E", "D"), ("F", "F")]
        baseline = detect_cycles(graph_of("ABCDEF", edges))
        assert detect_cycles(graph_of("ABCDEF", edges)) == baseline
        for seed in range(5):
            shuffled = detect_cycles(graph_of("ABCDEF", edges, shuffle_seed=seed))
            assert {frozenset(c) for c in shuffled} == {frozenset(c) for c in baseline}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "edges",
        [
            [],
            [("A", "B"), ("B", "C")],
            [("A", "B"), ("B", "C"), ("C", "A")],
            [("A", "A")],
            [("A", "B"), ("A", "C"), ("C", "D"), ("B", "D")],
            [("D", "A"), ("A", "B"), ("B", "D")],
        ],
    )
    def test_order_and_cycles_agree(self, edges: list[tuple[str, str]]) -> None:
        """topological_order should be None exactly when cycles exist."""
        graph = graph_of("ABCD", edges)
        assert (topological_order(graph) is None) == bool(detect_cycles(graph))
        assert (graph.topological_order is None) == bool(graph.cycles)


class TestTopologicalOrder:
    """Tests for topological_order."""

    @pytest.mark.unit
    def test_ties_broken_by_id(self) -> None:
        """Ready nodes should be emitted in ascending id order."""
        graph = graph_of("ABCD", [("D", "A")])
        assert topological_order(graph) == [sid("B"), sid("C"), sid("D"), sid("A")]

    @pytest.mark.unit
    def test_respects_edges(self) -> None:
        """Each edge source should come before its target."""
        edges = [("C", "A"), ("A", "B"), ("C", "B"), ("D", "C")]
        order = topological_order(graph_of("ABCD", edges))
        assert order is not None
        for a, b in edges:
            assert order.index(sid(a)) < order.index(sid(b))

    @pytest.mark.unit
    def test_empty_graph(self) -> None:
        """An empty graph should have an empty order."""
        assert topological_order(build_graph([], [])) == []


class TestTraversal:
    """Tests for reachability, roots, leaves and components."""

    @pytest.mark.unit
    def test_upstream_and_downstream(self) -> None:
        """Reachability should follow edge direction and exclude the start."""
        graph = graph_of("ABCD", [("A", "B"), ("B", "C"), ("D", "B")])
        assert get_downstream(graph, sid("A")) == [sid("B"), sid("C")]
        assert get_upstream(graph, sid("C")) == [sid("A"), sid("B"), sid("D")]
        direct = get_direct(graph, sid("B"))
        assert direct.upstream == [sid("A"), sid("D")]
        assert direct.downstream == [sid("C")]

    @pytest.mark.unit
    def test_downstream_on_cycle_excludes_self(self) -> None:
        """A node on a cycle should not list itself downstream."""
        graph = graph_of("XY", [("X", "Y"), ("Y", "X")])
        assert get_downstream(graph, sid("X")) == [sid("Y")]

    @pytest.mark.unit
    def test_roots_leaves_components(self) -> None:
        """Roots, leaves and weak components of a small forest."""
        graph = graph_of("ABCD", [("A", "B"), ("B", "C")])
        assert get_root_nodes(graph) == [sid("A"), sid("D")]
        assert get_leaf_nodes(graph) == [sid("C"), sid("D")]
        assert get_connected_components(graph) == [[sid("A"), sid("B"), sid("C")], [sid("D")]]

    @pytest.mark.unit
    def test_would_create_cycle(self) -> None:
        """Closing edges should be detected before they exist."""
        graph = graph_of("ABC", [("A", "B"), ("B", "C")])
        assert would_create_cycle(graph, sid("C"), sid("A"))
        assert would_create_cycle(graph, sid("A"), sid("A"))
        assert not would_create_cycle(graph, sid("A"), sid("C"))
        assert not would_create_cycle(graph, sid("A"), sid("Missing"))


class TestStats:
    """Tests for max_depth and compute_stats."""

    @pytest.mark.unit
    def test_stats_for_chain(self) -> None:
        """A chain plus an isolated node."""
        stats = compute_stats(graph_of("ABCD", [("A", "B"), ("B", "C")]))
        assert stats.node_count == 4
        assert stats.edge_count == 2
        assert stats.root_count == 2
        assert stats.leaf_count == 2
        assert stats.component_count == 2
        assert stats.has_cycles is False
        assert stats.max_depth == 2

    @pytest.mark.unit
    def test_max_depth_takes_longest_branch(self) -> None:
        """The longest path should win over shorter parallel paths."""
        graph = graph_of("ABCDE", [("A", "B"), ("A", "E"), ("B", "C"), ("C", "D"), ("E", "D")])
        assert max_depth(graph) == 3

    @pytest.mark.unit
    def test_max_depth_terminates_on_cycle(self) -> None:
        """Cyclic graphs should still produce a finite depth."""
        graph = graph_of("XYZ", [("X", "Y"), ("Y", "Z"), ("Z", "X")])
        assert max_depth(graph) == 2

    @pytest.mark.unit
    def test_long_chain_does_not_recurse(self) -> None:
        """Deep chains should be handled iteratively."""
        names = [f"N{i:05d}" for i in range(3000)]
        symbols = [pipe_symbol(n) for n in names]
        connections = [
            Connection(id=f"c{i}", from_symbol_id=sid(a), from_port="out", to_symbol_id=sid(b), to_port="in")
            for i, (a, b) in enumerate(zip(names, names[1:]))
        ]
        graph = build_graph(symbols, connections)
        assert max_depth(graph) == 2999
        assert graph.topological_order == [sid(n) for n in names]
        assert graph.cycles == []


class TestSubgraphAndExport:
    """Tests for induced_subgraph and the dict export."""

    @pytest.mark.unit
    def test_subgraph_keeps_ancestors_and_descendants(self) -> None:
        """The subgraph should hold the root, everything upstream and everything downstream."""
        graph = graph_of("ABCDE", [("A", "B"), ("B", "C"), ("D", "B")])
        sub = induced_subgraph(graph, sid("B"))
        assert sorted(sub.nodes) == [sid("A"), sid("B"), sid("C"), sid("D")]
        assert sub.edge_count == 3

        sub_a = induced_subgraph(graph, sid("A"))
        assert sorted(sub_a.nodes) == [sid("A"), sid("B"), sid("C")]
        assert sub_a.edge_count == 2

    @pytest.mark.unit
    def test_export_is_flat_and_reversible(self) -> None:
        """graph_to_dto should flatten nodes/edges and dto_to_graph should rebuild them."""
        graph = graph_of("XYZ", [("X", "Y"), ("Y", "Z"), ("Z", "X")])
        data = graph_to_dto(graph)
        assert len(data["nodes"]) == 3
        assert len(data["edges"]) == 3
        assert data["topological_order"] is None
        assert data["cycles"] == [[sid("X"), sid("Y"), sid("Z")]]

        rebuilt = dto_to_graph(data)
        assert rebuilt.nodes == graph.nodes
        assert rebuilt.edge_count == graph.edge_count
        assert rebuilt.cycles == graph.cycles
