"""Symbols table operations."""

import sqlite3
from typing import Any

# Columns usable with list_by(); anything else is rejected before SQL is built
FILTER_COLUMNS = frozenset({"namespace", "level", "kind", "status", "origin"})

SYMBOL_COLUMNS = (
    "id",
    "name",
    "namespace",
    "level",
    "kind",
    "version_major",
    "version_minor",
    "version_patch",
    "version_prerelease",
    "version_build",
    "language",
    "description",
    "status",
    "origin",
    "ports_json",
    "compatible_with_json",
    "source_location_json",
    "status_info_json",
    "generation_meta_json",
    "created_at",
    "updated_at",
)

_SELECT = f"SELECT {', '.join(SYMBOL_COLUMNS)} FROM symbols"


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally (use with ESCAPE '\\')."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SymbolsOperations:
    """Operations for the symbols table. Rows are returned as plain dicts."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def insert_symbol(self, row: dict[str, Any]) -> None:
        """
        Insert a symbol row.

        Raises:
            sqlite3.IntegrityError: If the id already exists
        """
        placeholders = ",".join("?" * len(SYMBOL_COLUMNS))
        self.conn.execute(
            f"INSERT INTO symbols ({', '.join(SYMBOL_COLUMNS)}) VALUES ({placeholders})",
            tuple(row[c] for c in SYMBOL_COLUMNS),
        )

    def update_symbol(self, row: dict[str, Any]) -> bool:
        """Overwrite every column of an existing row; False if the id is unknown."""
        assignments = ", ".join(f"{c} = ?" for c in SYMBOL_COLUMNS if c != "id")
        cur = self.conn.execute(
            f"UPDATE symbols SET {assignments} WHERE id = ?",
            (*(row[c] for c in SYMBOL_COLUMNS if c != "id"), row["id"]),
        )
        return cur.rowcount > 0

    def delete_symbol(self, symbol_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM symbols WHERE id = ?", (symbol_id,))
        return cur.rowcount > 0

    def get_symbol(self, symbol_id: str) -> dict[str, Any] | None:
        cur = self.conn.execute(f"{_SELECT} WHERE id = ?", (symbol_id,))
        row = cur.fetchone()
        return dict(row) if row else None

    def exists(self, symbol_id: str) -> bool:
        cur = self.conn.execute("SELECT 1 FROM symbols WHERE id = ?", (symbol_id,))
        return cur.fetchone() is not None

    def list_symbols(self) -> list[dict[str, Any]]:
        cur = self.conn.execute(f"{_SELECT} ORDER BY id")
        return [dict(r) for r in cur.fetchall()]

    def list_by(self, column: str, value: str) -> list[dict[str, Any]]:
        """
        List symbols where an indexed column equals a value.

        Raises:
            ValueError: If column is not one of FILTER_COLUMNS
        """
        if column not in FILTER_COLUMNS:
            raise ValueError(f"Invalid column: '{column}' not in allowed set: {sorted(FILTER_COLUMNS)}")
        cur = self.conn.execute(f"{_SELECT} WHERE {column} = ? ORDER BY id", (value,))
        return [dict(r) for r in cur.fetchall()]

    def list_by_tag(self, tag: str) -> list[dict[str, Any]]:
        cur = self.conn.execute(
            f"""
            {_SELECT}
            WHERE id IN (SELECT symbol_id FROM symbol_tags WHERE tag = ?)
            ORDER BY id
            """,
            (tag,),
        )
        return [dict(r) for r in cur.fetchall()]

    def search_symbols(self, text: str) -> list[dict[str, Any]]:
        """Case-insensitive substring search over name, namespace, description and tags."""
        pattern = f"%{escape_like(text)}%"
        cur = self.conn.execute(
            f"""
            {_SELECT}
            WHERE name LIKE ? ESCAPE '\\'
               OR namespace LIKE ? ESCAPE '\\'
               OR description LIKE ? ESCAPE '\\'
               OR id IN (SELECT symbol_id FROM symbol_tags WHERE tag LIKE ? ESCAPE '\\')
            ORDER BY id
            """,
            (pattern, pattern, pattern, pattern),
        )
        return [dict(r) for r in cur.fetchall()]
