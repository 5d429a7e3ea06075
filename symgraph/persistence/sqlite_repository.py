"""
SQLite-backed symbol repository.

Maps ComponentSymbol / Connection DTOs onto the tables owned by Database.
Each write runs inside one transaction, so a symbol row, its tags and its
containment links are stored all-or-nothing.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

from symgraph.helpers.dto.connection_dto import Connection
from symgraph.helpers.dto.symbol_dto import (
    AbstractionLevel,
    ComponentKind,
    ComponentSymbol,
    SemVer,
    SymbolOrigin,
    SymbolStatus,
)
from symgraph.helpers.symbol_codec_helper import (
    generation_meta_from_dict,
    generation_meta_to_dict,
    port_from_dict,
    port_to_dict,
    source_location_from_dict,
    source_location_to_dict,
    status_info_from_dict,
    status_info_to_dict,
    version_range_from_dict,
    version_range_to_dict,
)
from symgraph.persistence.db import Database
from symgraph.persistence.symbol_repository import SymbolRepository

logger = logging.getLogger(__name__)


def _dumps(value: Any) -> str | None:
    return json.dumps(value, ensure_ascii=False) if value is not None else None


def _loads(text: str | None) -> Any:
    return json.loads(text) if text else None


def symbol_to_row(symbol: ComponentSymbol) -> dict[str, Any]:
    return {
        "id": symbol.id,
        "name": symbol.name,
        "namespace": symbol.namespace,
        "level": symbol.level.value,
        "kind": symbol.kind.value,
        "version_major": symbol.version.major,
        "version_minor": symbol.version.minor,
        "version_patch": symbol.version.patch,
        "version_prerelease": symbol.version.prerelease,
        "version_build": symbol.version.build,
        "language": symbol.language,
        "description": symbol.description,
        "status": symbol.status.value,
        "origin": symbol.origin.value,
        "ports_json": _dumps([port_to_dict(p) for p in symbol.ports]),
        "compatible_with_json": _dumps([version_range_to_dict(r) for r in symbol.compatible_with]),
        "source_location_json": _dumps(source_location_to_dict(symbol.source_location)),
        "status_info_json": _dumps(status_info_to_dict(symbol.status_info)),
        "generation_meta_json": _dumps(generation_meta_to_dict(symbol.generation_meta)),
        "created_at": symbol.created_at,
        "updated_at": symbol.updated_at,
    }


def row_to_symbol(row: dict[str, Any], tags: list[str], contains: list[str]) -> ComponentSymbol:
    return ComponentSymbol(
        id=row["id"],
        name=row["name"],
        namespace=row["namespace"],
        level=AbstractionLevel(row["level"]),
        kind=ComponentKind(row["kind"]),
        version=SemVer(
            row["version_major"],
            row["version_minor"],
            row["version_patch"],
            row["version_prerelease"],
            row["version_build"],
        ),
        language=row["language"],
        ports=[port_from_dict(p) for p in _loads(row["ports_json"]) or []],
        tags=tags,
        description=row["description"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        status=SymbolStatus(row["status"]),
        origin=SymbolOrigin(row["origin"]),
        contains=contains,
        compatible_with=[version_range_from_dict(r) for r in _loads(row["compatible_with_json"]) or []],
        source_location=source_location_from_dict(_loads(row["source_location_json"])),
        status_info=status_info_from_dict(_loads(row["status_info_json"])),
        generation_meta=generation_meta_from_dict(_loads(row["generation_meta_json"])),
    )


def row_to_connection(row: dict[str, Any]) -> Connection:
    return Connection(
        id=row["id"],
        from_symbol_id=row["from_symbol_id"],
        from_port=row["from_port"],
        to_symbol_id=row["to_symbol_id"],
        to_port=row["to_port"],
        transform=row["transform"],
        created_at=row["created_at"],
    )


class SqliteSymbolRepository(SymbolRepository):
    """Repository over a Database; tables cascade deletes through foreign keys."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # ---------------------------- helpers ----------------------------
    def _hydrate(self, row: dict[str, Any]) -> ComponentSymbol:
        return row_to_symbol(
            row,
            self.db.symbol_tags.get_tags(row["id"]),
            self.db.containment.get_children(row["id"]),
        )

    def _hydrate_many(self, rows: list[dict[str, Any]]) -> list[ComponentSymbol]:
        if not rows:
            return []
        tags = self.db.symbol_tags.get_all_tags()
        children = self.db.containment.get_all_children()
        return [row_to_symbol(r, tags.get(r["id"], []), children.get(r["id"], [])) for r in rows]

    def _write_links(self, symbol: ComponentSymbol) -> None:
        self.db.symbol_tags.set_tags(symbol.id, symbol.tags)
        self.db.containment.set_children(symbol.id, symbol.contains)

    # ---------------------------- symbols ----------------------------
    def insert(self, symbol: ComponentSymbol) -> None:
        try:
            with self.db.transaction():
                self.db.symbols.insert_symbol(symbol_to_row(symbol))
                self._write_links(symbol)
        except sqlite3.IntegrityError as e:
            if self.db.symbols.exists(symbol.id):
                raise KeyError(f"Symbol already exists: {symbol.id}") from e
            raise

    def find(self, symbol_id: str) -> ComponentSymbol | None:
        row = self.db.symbols.get_symbol(symbol_id)
        return self._hydrate(row) if row else None

    def update(self, symbol: ComponentSymbol) -> None:
        with self.db.transaction():
            if not self.db.symbols.update_symbol(symbol_to_row(symbol)):
                raise KeyError(f"Symbol not found: {symbol.id}")
            self._write_links(symbol)

    def delete(self, symbol_id: str) -> bool:
        with self.db.transaction():
            deleted = self.db.symbols.delete_symbol(symbol_id)
        if deleted:
            logger.debug(f"[sqlite_repository] Deleted {symbol_id} (connections and containment cascaded)")
        return deleted

    def list(self) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_symbols())

    # ---------------------------- finders ----------------------------
    def find_by_namespace(self, namespace: str) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_by("namespace", namespace))

    def find_by_level(self, level: AbstractionLevel) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_by("level", level.value))

    def find_by_kind(self, kind: ComponentKind) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_by("kind", kind.value))

    def find_by_tag(self, tag: str) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_by_tag(tag))

    def find_by_status(self, status: SymbolStatus) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_by("status", status.value))

    def find_by_origin(self, origin: SymbolOrigin) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.list_by("origin", origin.value))

    def search(self, text: str) -> list[ComponentSymbol]:
        return self._hydrate_many(self.db.symbols.search_symbols(text))

    # -------------------------- containment --------------------------
    def find_contains(self, symbol_id: str) -> list[str]:
        return self.db.containment.get_children(symbol_id)

    def find_contained_by(self, symbol_id: str) -> str | None:
        return self.db.containment.get_parent(symbol_id)

    # -------------------------- connections --------------------------
    def insert_connection(self, connection: Connection) -> None:
        try:
            with self.db.transaction():
                self.db.connections.insert_connection(
                    {
                        "id": connection.id,
                        "from_symbol_id": connection.from_symbol_id,
                        "from_port": connection.from_port,
                        "to_symbol_id": connection.to_symbol_id,
                        "to_port": connection.to_port,
                        "transform": connection.transform,
                        "created_at": connection.created_at,
                    }
                )
        except sqlite3.IntegrityError as e:
            raise KeyError(f"Cannot store connection {connection.id}: {e}") from e

    def find_connection(self, connection_id: str) -> Connection | None:
        row = self.db.connections.get_connection(connection_id)
        return row_to_connection(row) if row else None

    def delete_connection(self, connection_id: str) -> bool:
        with self.db.transaction():
            return self.db.connections.delete_connection(connection_id)

    def find_connections_by_symbol(self, symbol_id: str) -> list[Connection]:
        return [row_to_connection(r) for r in self.db.connections.get_by_symbol(symbol_id)]

    def find_all_connections(self) -> list[Connection]:
        return [row_to_connection(r) for r in self.db.connections.get_all()]
