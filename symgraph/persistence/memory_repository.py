"""
In-memory symbol repository.

Used by tests and by the `memory` repository setting. Each instance is
independent, so several graphs can coexist in one process.
"""

from __future__ import annotations

import copy
import logging
import threading

from symgraph.helpers.dto.connection_dto import Connection
from symgraph.helpers.dto.symbol_dto import (
    AbstractionLevel,
    ComponentKind,
    ComponentSymbol,
    SymbolOrigin,
    SymbolStatus,
)
from symgraph.helpers.symbol_match_helper import matches_search
from symgraph.persistence.symbol_repository import SymbolRepository

logger = logging.getLogger(__name__)


class MemorySymbolRepository(SymbolRepository):
    """Dict-backed repository; writes are serialised with a lock."""

    def __init__(self) -> None:
        self._symbols: dict[str, ComponentSymbol] = {}
        self._connections: dict[str, Connection] = {}
        self._lock = threading.Lock()

    # ---------------------------- symbols ----------------------------
    def insert(self, symbol: ComponentSymbol) -> None:
        with self._lock:
            if symbol.id in self._symbols:
                raise KeyError(f"Symbol already exists: {symbol.id}")
            self._symbols[symbol.id] = copy.deepcopy(symbol)

    def find(self, symbol_id: str) -> ComponentSymbol | None:
        symbol = self._symbols.get(symbol_id)
        return copy.deepcopy(symbol) if symbol is not None else None

    def update(self, symbol: ComponentSymbol) -> None:
        with self._lock:
            if symbol.id not in self._symbols:
                raise KeyError(f"Symbol not found: {symbol.id}")
            self._symbols[symbol.id] = copy.deepcopy(symbol)

    def delete(self, symbol_id: str) -> bool:
        with self._lock:
            if self._symbols.pop(symbol_id, None) is None:
                return False

            dropped = [
                cid
                for cid, conn in self._connections.items()
                if symbol_id in (conn.from_symbol_id, conn.to_symbol_id)
            ]
            for cid in dropped:
                del self._connections[cid]

            for other in self._symbols.values():
                if symbol_id in other.contains:
                    other.contains = [c for c in other.contains if c != symbol_id]

        logger.debug(f"[memory_repository] Deleted {symbol_id} and {len(dropped)} connection(s)")
        return True

    def _snapshot(self) -> list[ComponentSymbol]:
        """Stored symbols in id order, taken under the lock."""
        with self._lock:
            return [self._symbols[sid] for sid in sorted(self._symbols)]

    def list(self) -> list[ComponentSymbol]:
        return [copy.deepcopy(s) for s in self._snapshot()]

    def _select(self, predicate) -> list[ComponentSymbol]:
        return [s for s in self.list() if predicate(s)]

    # ---------------------------- finders ----------------------------
    def find_by_namespace(self, namespace: str) -> list[ComponentSymbol]:
        return self._select(lambda s: s.namespace == namespace)

    def find_by_level(self, level: AbstractionLevel) -> list[ComponentSymbol]:
        return self._select(lambda s: s.level == level)

    def find_by_kind(self, kind: ComponentKind) -> list[ComponentSymbol]:
        return self._select(lambda s: s.kind == kind)

    def find_by_tag(self, tag: str) -> list[ComponentSymbol]:
        return self._select(lambda s: tag in s.tags)

    def find_by_status(self, status: SymbolStatus) -> list[ComponentSymbol]:
        return self._select(lambda s: s.status == status)

    def find_by_origin(self, origin: SymbolOrigin) -> list[ComponentSymbol]:
        return self._select(lambda s: s.origin == origin)

    def search(self, text: str) -> list[ComponentSymbol]:
        return self._select(lambda s: matches_search(s, text))

    # -------------------------- containment --------------------------
    def find_contains(self, symbol_id: str) -> list[str]:
        symbol = self._symbols.get(symbol_id)
        return list(symbol.contains) if symbol is not None else []

    def find_contained_by(self, symbol_id: str) -> str | None:
        for parent in self._snapshot():
            if symbol_id in parent.contains:
                return parent.id
        return None

    # -------------------------- connections --------------------------
    def insert_connection(self, connection: Connection) -> None:
        with self._lock:
            for endpoint in (connection.from_symbol_id, connection.to_symbol_id):
                if endpoint not in self._symbols:
                    raise KeyError(f"Symbol not found: {endpoint}")
            if connection.id in self._connections:
                raise KeyError(f"Connection already exists: {connection.id}")
            self._connections[connection.id] = copy.copy(connection)

    def find_connection(self, connection_id: str) -> Connection | None:
        conn = self._connections.get(connection_id)
        return copy.copy(conn) if conn is not None else None

    def delete_connection(self, connection_id: str) -> bool:
        with self._lock:
            return self._connections.pop(connection_id, None) is not None

    def _connection_snapshot(self) -> list[Connection]:
        with self._lock:
            return list(self._connections.values())

    def find_connections_by_symbol(self, symbol_id: str) -> list[Connection]:
        return [
            copy.copy(c)
            for c in self._connection_snapshot()
            if symbol_id in (c.from_symbol_id, c.to_symbol_id)
        ]

    def find_all_connections(self) -> list[Connection]:
        return [copy.copy(c) for c in self._connection_snapshot()]
