"""
Unit tests for the pydantic models in symgraph.interfaces.api.types.
"""

import pytest
from pydantic import ValidationError

from symgraph.helpers.dto.connection_dto import ValidationIssue, ValidationResult, WiringResult
from symgraph.helpers.dto.symbol_dto import PortDirection, SymbolStatus, TypeReference, VersionRange
from symgraph.interfaces.api.types import (
    ApiResponse,
    ConnectRequest,
    CyclesResponse,
    RegisterSymbolRequest,
    SymbolQueryRequest,
    SymbolResponse,
    TopologicalOrderResponse,
    TypeReferenceModel,
    ValidationResponse,
    WiringResponse,
)
from tests.factories import make_port, make_symbol


class TestEnvelope:
    """Test ApiResponse helpers."""

    @pytest.mark.unit
    def test_ok_and_fail(self):
        ok = ApiResponse.ok({"x": 1})
        assert ok.success
        assert ok.error is None

        failed = ApiResponse.fail("NOT_FOUND", "missing")
        assert not failed.success
        assert failed.data is None
        assert failed.error.details == []
        assert failed.model_dump()["error"] == {"code": "NOT_FOUND", "message": "missing", "details": []}


class TestSymbolTypes:
    """Test symbol request/response conversion."""

    @pytest.mark.unit
    def test_type_reference_round_trip(self):
        ref = TypeReference("core/Map@1.0.0", generics=(TypeReference("core/string@1.0.0"),), nullable=True)
        model = TypeReferenceModel.from_dto(ref)
        assert model.generics[0].symbol_id == "core/string@1.0.0"
        assert model.to_dto() == ref

    @pytest.mark.unit
    def test_symbol_response_formats_version(self):
        """Versions render as strings and version ranges as their constraints."""
        symbol = make_symbol(
            "Parse",
            version="1.4.0-beta.2",
            ports=[make_port("in", PortDirection.IN)],
            compatible_with=[VersionRange(constraint="^1.0.0"), VersionRange()],
        )
        response = SymbolResponse.from_dto(symbol)
        assert response.version == "1.4.0-beta.2"
        assert response.compatible_with == ["^1.0.0"]
        assert response.ports[0].type.symbol_id == "core/string@1.0.0"
        assert response.model_dump(mode="json")["kind"] == "function"

    @pytest.mark.unit
    def test_register_request_defaults(self):
        request = RegisterSymbolRequest.model_validate(
            {
                "name": "Parse",
                "kind": "function",
                "version": "1.0.0",
                "ports": [{"name": "in", "direction": "in", "type": {"symbol_id": "core/string@1.0.0"}}],
            }
        )
        assert request.namespace == ""
        assert request.level is None
        fields = request.to_fields()
        assert fields["status"] == SymbolStatus.DECLARED
        assert fields["ports"][0].direction == PortDirection.IN
        assert fields["ports"][0].type == TypeReference("core/string@1.0.0")

    @pytest.mark.unit
    def test_register_request_rejects_bad_direction(self):
        bad_port = {"name": "p", "direction": "up", "type": {"symbol_id": "t"}}
        with pytest.raises(ValidationError):
            RegisterSymbolRequest.model_validate({"name": "X", "kind": "function", "version": "1.0.0", "ports": [bad_port]})

    @pytest.mark.unit
    def test_query_request_to_dto(self):
        query = SymbolQueryRequest(namespace="app", tag="io").to_dto()
        assert (query.namespace, query.tag, query.kind) == ("app", "io", None)


class TestWiringTypes:
    """Test wiring request/response conversion."""

    @pytest.mark.unit
    def test_connect_request_to_dto(self):
        dto = ConnectRequest(from_symbol_id="a", from_port="o", to_symbol_id="b", to_port="i").to_dto()
        assert (dto.from_symbol_id, dto.to_port, dto.transform) == ("a", "i", None)

    @pytest.mark.unit
    def test_validation_response(self):
        result = ValidationResult(
            valid=True,
            warnings=[ValidationIssue(code="WOULD_CREATE_CYCLE", message="m", symbol_ids=["a"], severity="warning")],
        )
        response = ValidationResponse.from_dto(result)
        assert response.valid
        assert response.errors == []
        assert response.warnings[0].severity == "warning"

    @pytest.mark.unit
    def test_wiring_response(self):
        assert WiringResponse.from_dto(WiringResult(success=True, connection_id="c1")).connection_id == "c1"


class TestGraphTypes:
    """Test graph result wrappers."""

    @pytest.mark.unit
    def test_cycles_and_order_flags(self):
        assert CyclesResponse.from_dto([]).has_cycles is False
        assert CyclesResponse.from_dto([["a", "b"]]).has_cycles is True
        assert TopologicalOrderResponse.from_dto(None).has_order is False
        assert TopologicalOrderResponse.from_dto([]).has_order is True
