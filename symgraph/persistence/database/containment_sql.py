"""Containment link operations (parent contains child)."""

import sqlite3


class ContainmentOperations:
    """
    Operations for the containment table.

    child_id is UNIQUE, so inserting a child that already has another parent
    raises sqlite3.IntegrityError.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def set_children(self, parent_id: str, child_ids: list[str]) -> None:
        """Replace the ordered child list of a parent."""
        self.conn.execute("DELETE FROM containment WHERE parent_id = ?", (parent_id,))
        self.conn.executemany(
            "INSERT INTO containment (parent_id, child_id, position) VALUES (?, ?, ?)",
            [(parent_id, child_id, pos) for pos, child_id in enumerate(dict.fromkeys(child_ids))],
        )

    def get_children(self, parent_id: str) -> list[str]:
        cur = self.conn.execute(
            "SELECT child_id FROM containment WHERE parent_id = ? ORDER BY position",
            (parent_id,),
        )
        return [row[0] for row in cur.fetchall()]

    def get_parent(self, child_id: str) -> str | None:
        cur = self.conn.execute("SELECT parent_id FROM containment WHERE child_id = ?", (child_id,))
        row = cur.fetchone()
        return row[0] if row else None

    def get_all_children(self) -> dict[str, list[str]]:
        cur = self.conn.execute("SELECT parent_id, child_id FROM containment ORDER BY parent_id, position")
        result: dict[str, list[str]] = {}
        for parent_id, child_id in cur.fetchall():
            result.setdefault(parent_id, []).append(child_id)
        return result
