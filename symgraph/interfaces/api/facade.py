"""
Symbol graph API facade.

Single entry point for external callers. Each method delegates to a
service and wraps the outcome in an ApiResponse, so callers never see a
raised exception.

Error mapping:
- SymbolGraphError subclasses -> their ErrorCode
- pydantic / value errors in request data -> VALIDATION_FAILED
- anything else -> INTERNAL_ERROR with a sanitized message (full detail logged)
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from symgraph.helpers.exceptions import ErrorCode, SymbolGraphError, ValidationFailedError
from symgraph.helpers.logging_helper import sanitize_exception_message
from symgraph.interfaces.api.types.common_types import ApiResponse
from symgraph.interfaces.api.types.graph_types import (
    CyclesResponse,
    DependencyGraphResponse,
    GraphStatsResponse,
    TopologicalOrderResponse,
)
from symgraph.interfaces.api.types.symbol_types import (
    RegisterSymbolRequest,
    SymbolListResponse,
    SymbolQueryRequest,
    SymbolResponse,
)
from symgraph.interfaces.api.types.wiring_types import (
    CompatiblePortResponse,
    ConnectionResponse,
    ConnectRequest,
    UnconnectedPortResponse,
    ValidationResponse,
    WiringResponse,
)
from symgraph.services.dependency_graph_svc import DependencyGraphService
from symgraph.services.symbol_table_svc import SymbolTableService
from symgraph.services.wiring_svc import WiringService

F = TypeVar("F", bound=Callable[..., ApiResponse])


def api_call(safe_message: str) -> Callable[[F], F]:
    """Convert exceptions raised by a facade method into failed ApiResponses."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ApiResponse:
            try:
                return func(*args, **kwargs)
            except ValidationFailedError as e:
                return ApiResponse.fail(e.code.value, e.message, e.errors)
            except SymbolGraphError as e:
                return ApiResponse.fail(e.code.value, e.message)
            except ValidationError as e:
                details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
                return ApiResponse.fail(ErrorCode.VALIDATION_FAILED.value, "Invalid request", details)
            except ValueError as e:
                return ApiResponse.fail(ErrorCode.VALIDATION_FAILED.value, str(e))
            except Exception as e:
                return ApiResponse.fail(ErrorCode.INTERNAL_ERROR.value, sanitize_exception_message(e, safe_message))

        return wrapper  # type: ignore[return-value]

    return decorator


class SymbolGraphFacade:
    """Uniform-result API over the symbol table, dependency graph and wiring services."""

    def __init__(
        self,
        symbol_table: SymbolTableService,
        graph: DependencyGraphService,
        wiring: WiringService,
    ):
        self.symbol_table = symbol_table
        self.graph = graph
        self.wiring = wiring

    # ──────────────────────────────────────────────────────────────────────
    # Symbols
    # ──────────────────────────────────────────────────────────────────────

    @api_call("Failed to register symbol")
    def register_symbol(self, request: RegisterSymbolRequest | dict[str, Any]) -> ApiResponse:
        if not isinstance(request, RegisterSymbolRequest):
            request = RegisterSymbolRequest.model_validate(request)
        symbol = self.symbol_table.register_new(
            request.name,
            request.kind,
            request.version,
            namespace=request.namespace,
            level=request.level,
            **request.to_fields(),
        )
        return ApiResponse.ok(SymbolResponse.from_dto(symbol))

    @api_call("Failed to list symbols")
    def list_symbols(self, query: SymbolQueryRequest | dict[str, Any] | None = None) -> ApiResponse:
        if query is None:
            symbols = self.symbol_table.list()
        else:
            if not isinstance(query, SymbolQueryRequest):
                query = SymbolQueryRequest.model_validate(query)
            symbols = self.symbol_table.query(query.to_dto())
        return ApiResponse.ok(SymbolListResponse.from_dto(symbols))

    @api_call("Failed to load symbol")
    def get_symbol(self, symbol_id: str) -> ApiResponse:
        return ApiResponse.ok(SymbolResponse.from_dto(self.symbol_table.require(symbol_id)))

    @api_call("Failed to resolve symbol version")
    def resolve_symbol(self, namespace: str, name: str, constraint: str | None = None) -> ApiResponse:
        symbol = self.symbol_table.resolve(namespace, name, constraint)
        if symbol is None:
            target = f"{namespace}/{name}" if namespace else name
            return ApiResponse.fail(
                ErrorCode.NOT_FOUND.value,
                f"No version of {target} satisfies {constraint or '*'}",
            )
        return ApiResponse.ok(SymbolResponse.from_dto(symbol))

    @api_call("Failed to validate symbols")
    def validate_symbols(self, symbol_id: str | None = None) -> ApiResponse:
        """Validate the whole table, or a single symbol when `symbol_id` is given."""
        if symbol_id is None:
            result = self.symbol_table.validate()
        else:
            result = self.symbol_table.validate_symbol(symbol_id)
        return ApiResponse.ok(ValidationResponse.from_dto(result))

    # ──────────────────────────────────────────────────────────────────────
    # Wiring
    # ──────────────────────────────────────────────────────────────────────

    @api_call("Failed to connect ports")
    def wire(self, request: ConnectRequest | dict[str, Any]) -> ApiResponse:
        if not isinstance(request, ConnectRequest):
            request = ConnectRequest.model_validate(request)
        result = self.wiring.connect(request.to_dto())
        if not result.success:
            return ApiResponse.fail(result.error_code or ErrorCode.INTERNAL_ERROR.value, result.error or "")
        return ApiResponse.ok(WiringResponse.from_dto(result))

    @api_call("Failed to disconnect ports")
    def unwire(self, connection_id: str) -> ApiResponse:
        result = self.wiring.disconnect(connection_id)
        if not result.success:
            return ApiResponse.fail(result.error_code or ErrorCode.INTERNAL_ERROR.value, result.error or "")
        return ApiResponse.ok(WiringResponse.from_dto(result))

    @api_call("Failed to validate connection")
    def validate_connection(self, request: ConnectRequest | dict[str, Any]) -> ApiResponse:
        if not isinstance(request, ConnectRequest):
            request = ConnectRequest.model_validate(request)
        return ApiResponse.ok(ValidationResponse.from_dto(self.wiring.validate_connection(request.to_dto())))

    @api_call("Failed to list connections")
    def list_connections(self, symbol_id: str | None = None) -> ApiResponse:
        """All connections, or those touching `symbol_id`."""
        if symbol_id is None:
            connections = self.wiring.get_all_connections()
        else:
            connections = self.wiring.get_connections(symbol_id)
        return ApiResponse.ok([ConnectionResponse.from_dto(c) for c in connections])

    @api_call("Failed to search compatible ports")
    def find_compatible_ports(self, symbol_id: str, port_name: str) -> ApiResponse:
        ports = self.wiring.find_compatible_ports(symbol_id, port_name)
        return ApiResponse.ok([CompatiblePortResponse.from_dto(p) for p in ports])

    @api_call("Failed to list unconnected ports")
    def find_unconnected_required(self) -> ApiResponse:
        ports = self.wiring.find_unconnected_required_ports()
        return ApiResponse.ok([UnconnectedPortResponse.from_dto(p) for p in ports])

    # ──────────────────────────────────────────────────────────────────────
    # Graph
    # ──────────────────────────────────────────────────────────────────────

    @api_call("Failed to build dependency graph")
    def get_graph(self, root_id: str | None = None, include_structural: bool | None = None) -> ApiResponse:
        """Full graph, or the subgraph reachable from `root_id`."""
        if root_id is None:
            graph = self.graph.build_graph(include_structural)
        else:
            graph = self.graph.build_subgraph(root_id)
        return ApiResponse.ok(DependencyGraphResponse.from_dto(graph))

    @api_call("Failed to detect cycles")
    def detect_cycles(self) -> ApiResponse:
        return ApiResponse.ok(CyclesResponse.from_dto(self.graph.detect_cycles()))

    @api_call("Failed to compute topological order")
    def get_topological_order(self) -> ApiResponse:
        return ApiResponse.ok(TopologicalOrderResponse.from_dto(self.graph.get_topological_order()))

    @api_call("Failed to compute graph statistics")
    def get_stats(self) -> ApiResponse:
        return ApiResponse.ok(GraphStatsResponse.from_dto(self.graph.get_stats()))
