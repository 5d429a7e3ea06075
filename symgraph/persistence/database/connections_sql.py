"""Connection (wiring) operations."""

import sqlite3
from typing import Any

_SELECT = "SELECT id, from_symbol_id, from_port, to_symbol_id, to_port, transform, created_at FROM connections"


class ConnectionsOperations:
    """Operations for the connections table. Rows are returned as plain dicts."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def insert_connection(self, row: dict[str, Any]) -> None:
        """
        Insert a connection row.

        Raises:
            sqlite3.IntegrityError: If the id exists or an endpoint symbol is unknown
        """
        self.conn.execute(
            """
            INSERT INTO connections (id, from_symbol_id, from_port, to_symbol_id, to_port, transform, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                row["id"],
                row["from_symbol_id"],
                row["from_port"],
                row["to_symbol_id"],
                row["to_port"],
                row["transform"],
                row["created_at"],
            ),
        )

    def get_connection(self, connection_id: str) -> dict[str, Any] | None:
        cur = self.conn.execute(f"{_SELECT} WHERE id = ?", (connection_id,))
        row = cur.fetchone()
        return dict(row) if row else None

    def delete_connection(self, connection_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM connections WHERE id = ?", (connection_id,))
        return cur.rowcount > 0

    def get_by_symbol(self, symbol_id: str) -> list[dict[str, Any]]:
        cur = self.conn.execute(
            f"{_SELECT} WHERE from_symbol_id = ? OR to_symbol_id = ? ORDER BY created_at, rowid",
            (symbol_id, symbol_id),
        )
        return [dict(r) for r in cur.fetchall()]

    def get_all(self) -> list[dict[str, Any]]:
        cur = self.conn.execute(f"{_SELECT} ORDER BY created_at, rowid")
        return [dict(r) for r in cur.fetchall()]
