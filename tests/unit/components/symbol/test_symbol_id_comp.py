"""
Unit tests for symgraph.components.symbol.symbol_id_comp module.
"""

import pytest

from symgraph.components.symbol.symbol_id_comp import SymbolIdParts, build_symbol_id, parse_symbol_id
from symgraph.helpers.dto.symbol_dto import SemVer


class TestBuildSymbolId:
    """Tests for build_symbol_id."""

    @pytest.mark.unit
    def test_namespaced(self) -> None:
        """Should join namespace, name and version."""
        assert build_symbol_id("app/auth", "Login", SemVer(1, 2, 3)) == "app/auth/Login@1.2.3"

    @pytest.mark.unit
    def test_empty_namespace_has_no_leading_slash(self) -> None:
        """An empty namespace should produce `name@version`."""
        assert build_symbol_id("", "Token", SemVer(1, 0, 0)) == "Token@1.0.0"

    @pytest.mark.unit
    def test_strips_surrounding_slashes(self) -> None:
        """Leading and trailing slashes on the namespace should be dropped."""
        assert build_symbol_id("/core/", "string", SemVer(1, 0, 0)) == "core/string@1.0.0"

    @pytest.mark.unit
    def test_includes_prerelease_and_build(self) -> None:
        """Version qualifiers should appear in the id."""
        assert build_symbol_id("app", "Svc", SemVer(2, 0, 0, "rc.1", "b7")) == "app/Svc@2.0.0-rc.1+b7"


class TestParseSymbolId:
    """Tests for parse_symbol_id."""

    @pytest.mark.unit
    def test_round_trip(self) -> None:
        """Parsing a built id should give back its parts."""
        version = SemVer(1, 4, 0, "beta")
        parts = parse_symbol_id(build_symbol_id("app/ui/forms", "Field", version))
        assert parts == SymbolIdParts("app/ui/forms", "Field", version)

    @pytest.mark.unit
    def test_without_namespace(self) -> None:
        """An id without a namespace should parse with namespace ''."""
        assert parse_symbol_id("Token@1.0.0") == SymbolIdParts("", "Token", SemVer(1, 0, 0))

    @pytest.mark.unit
    @pytest.mark.parametrize("symbol_id", ["", "Token", "Token@", "app/Token@1.0", "app/@1.0.0", "a@b@1.0.0"])
    def test_malformed_returns_none(self, symbol_id: str) -> None:
        """Malformed ids or versions should return None."""
        assert parse_symbol_id(symbol_id) is None
