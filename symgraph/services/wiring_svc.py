"""Wiring service - connect output ports to input ports.

connect() runs its checks in a fixed order and stops at the first failure:

    1. self-connection              SELF_CONNECTION
    2. both symbols exist           NOT_FOUND
    3. both ports exist             PORT_NOT_FOUND
    4. not an exact duplicate       DUPLICATE_CONNECTION
    5. port compatibility           INCOMPATIBLE_PORTS
    6. input cardinality            CARDINALITY_VIOLATION
    7. cycle prevention (optional)  WOULD_CREATE_CYCLE

Results are returned as WiringResult / ValidationResult values. Repository
faults are logged and reported as INTERNAL_ERROR.

Validate-then-insert is serialised with an in-process lock so two
concurrent connects cannot both claim a single-cardinality input port.
"""

from __future__ import annotations

import logging
import threading
import uuid

from symgraph.components.compatibility.port_compatibility_comp import check_port_compatibility
from symgraph.components.graph.graph_algorithms_comp import would_create_cycle
from symgraph.helpers.dto.compatibility_dto import TypeCompatibilityMode
from symgraph.helpers.dto.connection_dto import (
    CompatiblePort,
    Connection,
    ConnectionRequest,
    UnconnectedPort,
    ValidationIssue,
    ValidationResult,
    WiringResult,
)
from symgraph.helpers.dto.symbol_dto import ComponentSymbol, PortDefinition
from symgraph.helpers.exceptions import ErrorCode, NotFoundError
from symgraph.helpers.logging_helper import sanitize_exception_message
from symgraph.helpers.time_helper import now_ms
from symgraph.persistence.symbol_repository import SymbolRepository
from symgraph.services.dependency_graph_svc import DependencyGraphService

logger = logging.getLogger(__name__)


class _Rejection(Exception):
    """Internal short-circuit carrying the first failed check."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class WiringService:
    """Creates, removes and validates connections between symbol ports."""

    def __init__(
        self,
        repo: SymbolRepository,
        graph: DependencyGraphService,
        type_mode: TypeCompatibilityMode = TypeCompatibilityMode.COMPATIBLE,
        check_cardinality: bool = True,
        reject_cycles: bool = False,
    ):
        """
        Args:
            repo: Repository holding symbols and connections
            graph: Dependency graph service used for cycle checks
            type_mode: Compatibility mode applied to every connect
            check_cardinality: Enforce one incoming connection on non-multiple inputs
            reject_cycles: Refuse connections that would close a cycle
                (otherwise they are allowed and reported as warnings)
        """
        self.repo = repo
        self.graph = graph
        self.type_mode = type_mode
        self.check_cardinality = check_cardinality
        self.reject_cycles = reject_cycles
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------
    def _resolve(self, request: ConnectionRequest) -> tuple[ComponentSymbol, PortDefinition, ComponentSymbol, PortDefinition]:
        """Steps 1-3: endpoints and ports."""
        if request.from_symbol_id == request.to_symbol_id:
            raise _Rejection(ErrorCode.SELF_CONNECTION, f"Cannot connect symbol '{request.from_symbol_id}' to itself")

        source = self.repo.find(request.from_symbol_id)
        if source is None:
            raise _Rejection(ErrorCode.NOT_FOUND, f"Source symbol not found: {request.from_symbol_id}")
        target = self.repo.find(request.to_symbol_id)
        if target is None:
            raise _Rejection(ErrorCode.NOT_FOUND, f"Target symbol not found: {request.to_symbol_id}")

        out_port = source.get_port(request.from_port)
        if out_port is None:
            raise _Rejection(ErrorCode.PORT_NOT_FOUND, f"Port '{request.from_port}' not found on {source.id}")
        in_port = target.get_port(request.to_port)
        if in_port is None:
            raise _Rejection(ErrorCode.PORT_NOT_FOUND, f"Port '{request.to_port}' not found on {target.id}")

        return source, out_port, target, in_port

    def _check(self, request: ConnectionRequest) -> None:
        """Steps 1-6; raises _Rejection on the first failure."""
        _, out_port, _, in_port = self._resolve(request)

        incoming = self.get_incoming_connections(request.to_symbol_id, request.to_port)
        for conn in incoming:
            if conn.from_symbol_id == request.from_symbol_id and conn.from_port == request.from_port:
                raise _Rejection(ErrorCode.DUPLICATE_CONNECTION, f"Connection already exists: {conn.id}")

        compat = check_port_compatibility(out_port, in_port, self.type_mode)
        if not compat.compatible:
            raise _Rejection(ErrorCode.INCOMPATIBLE_PORTS, compat.reason or "Ports are incompatible")

        if self.check_cardinality and not in_port.multiple and incoming:
            raise _Rejection(
                ErrorCode.CARDINALITY_VIOLATION,
                f"Input port '{request.to_port}' on {request.to_symbol_id} already has a connection "
                f"and does not accept multiple",
            )

    def _closes_cycle(self, request: ConnectionRequest) -> bool:
        graph = self.graph.build_graph(include_structural=False)
        return would_create_cycle(graph, request.from_symbol_id, request.to_symbol_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def connect(self, request: ConnectionRequest) -> WiringResult:
        """Validate and persist a connection."""
        with self._lock:
            try:
                self._check(request)
                if self.reject_cycles and self._closes_cycle(request):
                    raise _Rejection(
                        ErrorCode.WOULD_CREATE_CYCLE,
                        f"Connecting {request.from_symbol_id} -> {request.to_symbol_id} would create a cycle",
                    )

                connection = Connection(
                    id=str(uuid.uuid4()),
                    from_symbol_id=request.from_symbol_id,
                    from_port=request.from_port,
                    to_symbol_id=request.to_symbol_id,
                    to_port=request.to_port,
                    transform=request.transform,
                    created_at=now_ms(),
                )
                self.repo.insert_connection(connection)
            except _Rejection as r:
                logger.info(f"[wiring] Rejected {_describe(request)}: {r.code.value} {r.message}")
                return WiringResult(success=False, error=r.message, error_code=r.code.value)
            except Exception as e:
                message = sanitize_exception_message(e, "Failed to store connection")
                return WiringResult(success=False, error=message, error_code=ErrorCode.INTERNAL_ERROR.value)

        logger.info(f"[wiring] Connected {_describe(request)} as {connection.id}")
        return WiringResult(success=True, connection_id=connection.id)

    def disconnect(self, connection_id: str) -> WiringResult:
        try:
            with self._lock:
                removed = self.repo.delete_connection(connection_id)
        except Exception as e:
            message = sanitize_exception_message(e, "Failed to remove connection")
            return WiringResult(success=False, error=message, error_code=ErrorCode.INTERNAL_ERROR.value)

        if not removed:
            return WiringResult(
                success=False,
                error=f"Connection not found: {connection_id}",
                error_code=ErrorCode.NOT_FOUND.value,
            )
        logger.info(f"[wiring] Disconnected {connection_id}")
        return WiringResult(success=True, connection_id=connection_id)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate_connection(self, request: ConnectionRequest) -> ValidationResult:
        """
        Run the connect() checks without persisting.

        A connection that would close a cycle is an error when cycles are
        rejected and a warning otherwise.
        """
        result = ValidationResult()
        symbol_ids = [request.from_symbol_id, request.to_symbol_id]
        try:
            self._check(request)
            if self._closes_cycle(request):
                issue = ValidationIssue(
                    code=ErrorCode.WOULD_CREATE_CYCLE.value,
                    message=f"Connecting {request.from_symbol_id} -> {request.to_symbol_id} would create a cycle",
                    symbol_ids=symbol_ids,
                    severity="error" if self.reject_cycles else "warning",
                )
                (result.errors if self.reject_cycles else result.warnings).append(issue)
        except _Rejection as r:
            result.errors.append(ValidationIssue(code=r.code.value, message=r.message, symbol_ids=symbol_ids))
        except Exception as e:
            message = sanitize_exception_message(e, "Failed to validate connection")
            result.errors.append(
                ValidationIssue(code=ErrorCode.INTERNAL_ERROR.value, message=message, symbol_ids=symbol_ids)
            )

        result.valid = not result.errors
        return result

    def validate_all_connections(self) -> ValidationResult:
        """Re-check every stored connection against the current symbols."""
        result = ValidationResult()
        per_input: dict[tuple[str, str], list[Connection]] = {}

        for conn in self.repo.find_all_connections():
            ids = [conn.from_symbol_id, conn.to_symbol_id]
            request = ConnectionRequest(conn.from_symbol_id, conn.from_port, conn.to_symbol_id, conn.to_port)
            try:
                _, out_port, _, in_port = self._resolve(request)
            except _Rejection as r:
                result.errors.append(ValidationIssue(code=r.code.value, message=f"{conn.id}: {r.message}", symbol_ids=ids))
                continue

            compat = check_port_compatibility(out_port, in_port, self.type_mode)
            if not compat.compatible:
                result.errors.append(
                    ValidationIssue(
                        code=ErrorCode.INCOMPATIBLE_PORTS.value,
                        message=f"{conn.id}: {compat.reason}",
                        symbol_ids=ids,
                    )
                )
            if not in_port.multiple:
                per_input.setdefault((conn.to_symbol_id, conn.to_port), []).append(conn)

        if self.check_cardinality:
            for (symbol_id, port_name), conns in per_input.items():
                if len(conns) > 1:
                    result.errors.append(
                        ValidationIssue(
                            code=ErrorCode.CARDINALITY_VIOLATION.value,
                            message=f"Input port '{port_name}' on {symbol_id} has {len(conns)} connections",
                            symbol_ids=[symbol_id, *(c.from_symbol_id for c in conns)],
                        )
                    )

        result.valid = not result.errors
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_connections(self, symbol_id: str) -> list[Connection]:
        return self.repo.find_connections_by_symbol(symbol_id)

    def get_all_connections(self) -> list[Connection]:
        return self.repo.find_all_connections()

    def get_incoming_connections(self, symbol_id: str, port_name: str) -> list[Connection]:
        return [
            c
            for c in self.repo.find_connections_by_symbol(symbol_id)
            if c.to_symbol_id == symbol_id and c.to_port == port_name
        ]

    def find_compatible_ports(self, symbol_id: str, port_name: str) -> list[CompatiblePort]:
        """
        Ports on other symbols that could be wired to the given port.

        Output-capable ports are matched against input-capable ports and vice
        versa. Sorted by score (highest first), then symbol id, then port name.

        Raises:
            NotFoundError: If the symbol or port does not exist
        """
        symbol = self.repo.find(symbol_id)
        if symbol is None:
            raise NotFoundError(f"Symbol not found: {symbol_id}")
        port = symbol.get_port(port_name)
        if port is None:
            raise NotFoundError(f"Port '{port_name}' not found on {symbol_id}")

        best: dict[tuple[str, str], int] = {}
        for other in self.repo.list():
            if other.id == symbol_id:
                continue
            for candidate in other.ports:
                scores = []
                if port.is_output_capable and candidate.is_input_capable:
                    scores.append(check_port_compatibility(port, candidate, self.type_mode))
                if port.is_input_capable and candidate.is_output_capable:
                    scores.append(check_port_compatibility(candidate, port, self.type_mode))
                for compat in scores:
                    if compat.compatible:
                        key = (other.id, candidate.name)
                        best[key] = max(best.get(key, 0), compat.score)

        matches = [CompatiblePort(symbol_id=sid, port_name=name, score=score) for (sid, name), score in best.items()]
        matches.sort(key=lambda m: (-m.score, m.symbol_id, m.port_name))
        return matches

    def find_unconnected_required_ports(self) -> list[UnconnectedPort]:
        """Required, input-capable ports with no incoming connection."""
        targeted = {(c.to_symbol_id, c.to_port) for c in self.repo.find_all_connections()}
        return [
            UnconnectedPort(symbol_id=s.id, port_name=p.name, port_direction=p.direction.value)
            for s in self.repo.list()
            for p in s.ports
            if p.required and p.is_input_capable and (s.id, p.name) not in targeted
        ]

    def has_all_required_ports_connected(self, symbol_id: str) -> bool:
        return not any(u.symbol_id == symbol_id for u in self.find_unconnected_required_ports())


def _describe(request: ConnectionRequest) -> str:
    return f"{request.from_symbol_id}.{request.from_port} -> {request.to_symbol_id}.{request.to_port}"
