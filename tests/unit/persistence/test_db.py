"""
Unit tests for symgraph.persistence.db module.

Tests schema creation, pragmas and transaction grouping.
"""

import sqlite3

import pytest

from symgraph.persistence.db import SCHEMA_VERSION, Database
from symgraph.persistence.sqlite_repository import symbol_to_row
from tests.factories import make_symbol


def table_names(db: Database) -> set[str]:
    cur = db.conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row[0] for row in cur.fetchall()}


class TestDatabaseInit:
    """Tests for Database construction."""

    @pytest.mark.unit
    def test_creates_tables(self, in_memory_db: Database) -> None:
        """Every table should exist after construction."""
        assert {"symbols", "symbol_tags", "containment", "connections", "meta"} <= table_names(in_memory_db)

    @pytest.mark.unit
    def test_records_schema_version(self, in_memory_db: Database) -> None:
        """The schema version should be stored in meta."""
        assert in_memory_db.meta.get("schema_version") == str(SCHEMA_VERSION)

    @pytest.mark.unit
    def test_foreign_keys_enabled(self, in_memory_db: Database) -> None:
        """Foreign keys must be enforced for cascades to work."""
        assert in_memory_db.conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    @pytest.mark.unit
    def test_creates_parent_directory(self, tmp_path) -> None:
        """A file database should create its missing parent directory and reopen cleanly."""
        path = tmp_path / "nested" / "dir" / "graph.sqlite"
        db = Database(str(path))
        db.symbols.insert_symbol(symbol_to_row(make_symbol("Kept")))
        db.conn.commit()
        db.close()
        assert path.exists()

        reopened = Database(str(path))
        try:
            assert reopened.symbols.exists("app/Kept@1.0.0")
        finally:
            reopened.close()


class TestTransaction:
    """Tests for Database.transaction."""

    @pytest.mark.unit
    def test_commits_on_success(self, in_memory_db: Database) -> None:
        """Writes inside a successful block should persist."""
        with in_memory_db.transaction():
            in_memory_db.symbols.insert_symbol(symbol_to_row(make_symbol("A")))
        assert in_memory_db.symbols.exists("app/A@1.0.0")

    @pytest.mark.unit
    def test_rolls_back_on_error(self, in_memory_db: Database) -> None:
        """A failing block should leave no partial writes."""
        with pytest.raises(RuntimeError), in_memory_db.transaction():
            in_memory_db.symbols.insert_symbol(symbol_to_row(make_symbol("A")))
            in_memory_db.symbol_tags.set_tags("app/A@1.0.0", ["x"])
            raise RuntimeError("abort")
        assert not in_memory_db.symbols.exists("app/A@1.0.0")
        assert in_memory_db.symbol_tags.get_tags("app/A@1.0.0") == []

    @pytest.mark.unit
    def test_nested_blocks_roll_back_together(self, in_memory_db: Database) -> None:
        """An inner block should join the outer transaction."""
        with pytest.raises(sqlite3.IntegrityError), in_memory_db.transaction():
            in_memory_db.symbols.insert_symbol(symbol_to_row(make_symbol("A")))
            with in_memory_db.transaction():
                in_memory_db.symbols.insert_symbol(symbol_to_row(make_symbol("B")))
            in_memory_db.symbols.insert_symbol(symbol_to_row(make_symbol("A")))
        assert not in_memory_db.symbols.exists("app/A@1.0.0")
        assert not in_memory_db.symbols.exists("app/B@1.0.0")
