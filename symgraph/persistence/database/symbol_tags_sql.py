"""Symbol tag operations (ordered tag list per symbol)."""

import sqlite3


class SymbolTagsOperations:
    """Operations for the symbol_tags table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def set_tags(self, symbol_id: str, tags: list[str]) -> None:
        """Replace the tag list of a symbol, keeping order and dropping repeats."""
        self.conn.execute("DELETE FROM symbol_tags WHERE symbol_id = ?", (symbol_id,))
        unique = list(dict.fromkeys(tags))
        self.conn.executemany(
            "INSERT INTO symbol_tags (symbol_id, tag, position) VALUES (?, ?, ?)",
            [(symbol_id, tag, pos) for pos, tag in enumerate(unique)],
        )

    def get_tags(self, symbol_id: str) -> list[str]:
        cur = self.conn.execute(
            "SELECT tag FROM symbol_tags WHERE symbol_id = ? ORDER BY position",
            (symbol_id,),
        )
        return [row[0] for row in cur.fetchall()]

    def get_all_tags(self) -> dict[str, list[str]]:
        """Tags of every symbol, keyed by symbol id (bulk load for list())."""
        cur = self.conn.execute("SELECT symbol_id, tag FROM symbol_tags ORDER BY symbol_id, position")
        result: dict[str, list[str]] = {}
        for symbol_id, tag in cur.fetchall():
            result.setdefault(symbol_id, []).append(tag)
        return result
