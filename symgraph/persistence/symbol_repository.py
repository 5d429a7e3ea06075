"""
Symbol repository capability interface.

Services depend on this ABC only; storage specifics live in the concrete
implementations (MemorySymbolRepository, SqliteSymbolRepository).

Contract shared by every implementation:
- Records are returned as copies; mutating a returned symbol never changes
  stored state.
- `insert` rejects an existing id and `update` rejects an unknown id
  (both with KeyError); services translate these into domain errors.
- A symbol's `contains` list is the source of containment links, so
  find_contains / find_contained_by always agree with the stored symbols.
- `delete` cascades to the symbol's connections (either endpoint) and to
  every containment link that mentions it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from symgraph.helpers.dto.connection_dto import Connection
from symgraph.helpers.dto.symbol_dto import (
    AbstractionLevel,
    ComponentKind,
    ComponentSymbol,
    SymbolOrigin,
    SymbolStatus,
)


class SymbolRepository(ABC):
    """Storage for component symbols, containment links and connections."""

    # ---------------------------- symbols ----------------------------
    @abstractmethod
    def insert(self, symbol: ComponentSymbol) -> None:
        """Store a new symbol. Raises KeyError if the id already exists."""

    @abstractmethod
    def find(self, symbol_id: str) -> ComponentSymbol | None:
        """Return the symbol or None."""

    @abstractmethod
    def update(self, symbol: ComponentSymbol) -> None:
        """Replace a stored symbol wholesale. Raises KeyError if absent."""

    @abstractmethod
    def delete(self, symbol_id: str) -> bool:
        """Delete a symbol with its connections and containment links; False if absent."""

    @abstractmethod
    def list(self) -> list[ComponentSymbol]:
        """All symbols ordered by id."""

    # ---------------------------- finders ----------------------------
    @abstractmethod
    def find_by_namespace(self, namespace: str) -> list[ComponentSymbol]: ...

    @abstractmethod
    def find_by_level(self, level: AbstractionLevel) -> list[ComponentSymbol]: ...

    @abstractmethod
    def find_by_kind(self, kind: ComponentKind) -> list[ComponentSymbol]: ...

    @abstractmethod
    def find_by_tag(self, tag: str) -> list[ComponentSymbol]: ...

    @abstractmethod
    def find_by_status(self, status: SymbolStatus) -> list[ComponentSymbol]: ...

    @abstractmethod
    def find_by_origin(self, origin: SymbolOrigin) -> list[ComponentSymbol]: ...

    @abstractmethod
    def search(self, text: str) -> list[ComponentSymbol]:
        """Case-insensitive substring search over name, namespace, description and tags."""

    # -------------------------- containment --------------------------
    @abstractmethod
    def find_contains(self, symbol_id: str) -> list[str]:
        """Child ids of a symbol (empty when absent)."""

    @abstractmethod
    def find_contained_by(self, symbol_id: str) -> str | None:
        """Parent id of a symbol, or None for a containment root."""

    # -------------------------- connections --------------------------
    @abstractmethod
    def insert_connection(self, connection: Connection) -> None:
        """Store a connection. Raises KeyError if either endpoint symbol is unknown."""

    @abstractmethod
    def find_connection(self, connection_id: str) -> Connection | None: ...

    @abstractmethod
    def delete_connection(self, connection_id: str) -> bool: ...

    @abstractmethod
    def find_connections_by_symbol(self, symbol_id: str) -> list[Connection]:
        """Connections with the symbol at either end, ordered by creation."""

    @abstractmethod
    def find_all_connections(self) -> list[Connection]:
        """All connections ordered by creation."""
