"""
Unit tests for symgraph.components.symbol.symbol_query_comp module.

Tests structural type-reference queries and query filtering.
"""

import pytest

from symgraph.components.symbol.symbol_query_comp import (
    filter_by_query,
    filter_untested,
    find_dependents,
    iter_type_ids,
    referenced_type_ids,
    references_symbol,
)
from symgraph.helpers.dto.symbol_dto import ComponentKind, ComponentQuery, PortDirection, SymbolStatus, TypeReference
from tests.factories import STRING, make_port, make_symbol

LIST = "core/List@1.0.0"
MAP = "core/Map@1.0.0"
USER = "app/User@1.0.0"


class TestTypeReferences:
    """Tests for iter_type_ids and referenced_type_ids."""

    @pytest.mark.unit
    def test_iter_type_ids_depth_first(self) -> None:
        """Nested generics should be yielded depth first."""
        ref = TypeReference(MAP, generics=(TypeReference(STRING), TypeReference(LIST, generics=(TypeReference(USER),))))
        assert list(iter_type_ids(ref)) == [MAP, STRING, LIST, USER]

    @pytest.mark.unit
    def test_referenced_type_ids_deduplicated(self) -> None:
        """Each referenced id should appear once, in first-seen order."""
        symbol = make_symbol(
            "Repo",
            ports=[
                make_port("key", PortDirection.IN, STRING),
                make_port("users", PortDirection.OUT, LIST, generics=[TypeReference(USER)]),
                make_port("name", PortDirection.OUT, STRING),
            ],
        )
        assert referenced_type_ids(symbol) == [STRING, LIST, USER]

    @pytest.mark.unit
    def test_no_ports_no_references(self) -> None:
        """A symbol without ports should reference nothing."""
        assert referenced_type_ids(make_symbol("Empty")) == []


class TestFindDependents:
    """Tests for references_symbol and find_dependents."""

    @pytest.mark.unit
    def test_finds_direct_and_generic_references(self) -> None:
        """Both top-level and generic-argument references should count."""
        direct = make_symbol("Direct", ports=[make_port("u", PortDirection.IN, USER)])
        nested = make_symbol("Nested", ports=[make_port("us", PortDirection.OUT, LIST, generics=[TypeReference(USER)])])
        unrelated = make_symbol("Other", ports=[make_port("s", PortDirection.IN, STRING)])

        assert references_symbol(nested, USER)
        assert not references_symbol(unrelated, USER)
        assert [s.name for s in find_dependents(USER, [direct, nested, unrelated])] == ["Direct", "Nested"]


class TestFiltering:
    """Tests for filter_by_query and filter_untested."""

    @pytest.mark.unit
    def test_filter_by_query_combines_filters(self) -> None:
        """All filters set on the query should have to match."""
        a = make_symbol("Alpha", tags=["core"], namespace="app")
        b = make_symbol("Beta", ComponentKind.TYPE, tags=["core"], namespace="app")
        c = make_symbol("Gamma", tags=["core"], namespace="lib")

        query = ComponentQuery(namespace="app", tag="core", kind=ComponentKind.FUNCTION)
        assert filter_by_query([a, b, c], query) == [a]

    @pytest.mark.unit
    def test_search_is_case_insensitive(self) -> None:
        """search should match name, description and tags regardless of case."""
        a = make_symbol("TokenParser", description="Parses tokens")
        b = make_symbol("Renderer", tags=["Output"])
        assert filter_by_query([a, b], ComponentQuery(search="token")) == [a]
        assert filter_by_query([a, b], ComponentQuery(search="OUTPUT")) == [b]

    @pytest.mark.unit
    def test_filter_untested(self) -> None:
        """Only tested and executed symbols should be excluded."""
        symbols = [make_symbol(status.value.title(), status=status) for status in SymbolStatus]
        remaining = {s.status for s in filter_untested(symbols)}
        assert remaining == {SymbolStatus.DECLARED, SymbolStatus.REFERENCED}
