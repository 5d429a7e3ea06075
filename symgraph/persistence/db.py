import contextlib
import os
import sqlite3
import threading
from collections.abc import Iterator

# Import table-specific operation classes
from symgraph.persistence.database.connections_sql import ConnectionsOperations
from symgraph.persistence.database.containment_sql import ContainmentOperations
from symgraph.persistence.database.meta_sql import MetaOperations
from symgraph.persistence.database.symbol_tags_sql import SymbolTagsOperations
from symgraph.persistence.database.symbols_sql import SymbolsOperations

__all__ = [
    "SCHEMA",
    "SCHEMA_VERSION",
    "Database",
]


# ----------------------------------------------------------------------
#  Database Schema
# ----------------------------------------------------------------------

SCHEMA = [
    # Symbols - one row per registered component symbol.
    # Ports, compatible ranges and metadata blocks are JSON text.
    """
    CREATE TABLE IF NOT EXISTS symbols (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        namespace TEXT NOT NULL DEFAULT '',
        level TEXT NOT NULL,
        kind TEXT NOT NULL,
        version_major INTEGER NOT NULL,
        version_minor INTEGER NOT NULL,
        version_patch INTEGER NOT NULL,
        version_prerelease TEXT,
        version_build TEXT,
        language TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        status TEXT NOT NULL,
        origin TEXT NOT NULL,
        ports_json TEXT NOT NULL DEFAULT '[]',
        compatible_with_json TEXT NOT NULL DEFAULT '[]',
        source_location_json TEXT,
        status_info_json TEXT,
        generation_meta_json TEXT,
        created_at INTEGER NOT NULL,
        updated_at INTEGER NOT NULL
    );
    """,
    # Indexes for the indexed finders
    """
    CREATE INDEX IF NOT EXISTS idx_symbols_namespace ON symbols(namespace);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_symbols_level ON symbols(level);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_symbols_kind ON symbols(kind);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_symbols_status ON symbols(status);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_symbols_origin ON symbols(origin);
    """,
    # Symbol tags - normalized, ordered tag list per symbol
    """
    CREATE TABLE IF NOT EXISTS symbol_tags (
        symbol_id TEXT NOT NULL,
        tag TEXT NOT NULL,
        position INTEGER NOT NULL,
        PRIMARY KEY (symbol_id, tag),
        FOREIGN KEY (symbol_id) REFERENCES symbols(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_symbol_tags_tag ON symbol_tags(tag);
    """,
    # Containment - parent/child links; UNIQUE child keeps the hierarchy a forest
    """
    CREATE TABLE IF NOT EXISTS containment (
        parent_id TEXT NOT NULL,
        child_id TEXT NOT NULL UNIQUE,
        position INTEGER NOT NULL,
        PRIMARY KEY (parent_id, child_id),
        FOREIGN KEY (parent_id) REFERENCES symbols(id) ON DELETE CASCADE,
        FOREIGN KEY (child_id) REFERENCES symbols(id) ON DELETE CASCADE
    );
    """,
    # Connections - wiring between an output port and an input port
    """
    CREATE TABLE IF NOT EXISTS connections (
        id TEXT PRIMARY KEY,
        from_symbol_id TEXT NOT NULL,
        from_port TEXT NOT NULL,
        to_symbol_id TEXT NOT NULL,
        to_port TEXT NOT NULL,
        transform TEXT,
        created_at INTEGER NOT NULL,
        FOREIGN KEY (from_symbol_id) REFERENCES symbols(id) ON DELETE CASCADE,
        FOREIGN KEY (to_symbol_id) REFERENCES symbols(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_connections_from ON connections(from_symbol_id);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_connections_to ON connections(to_symbol_id, to_port);
    """,
    # Metadata key-value store (schema version, etc.)
    """
    CREATE TABLE IF NOT EXISTS meta (
        key TEXT PRIMARY KEY,
        value TEXT
    );
    """,
]

SCHEMA_VERSION = 1


class Database:
    """
    Symbol graph database.

    Owns the SQLite connection and exposes one operations object per table.
    Operation classes never commit on their own (except meta); callers group
    writes with `transaction()`.
    """

    def __init__(self, path: str):
        self.path = path
        if path != ":memory:":
            # Ensure parent directory exists so sqlite can create the DB file.
            db_dir = os.path.dirname(path) or "."
            try:
                os.makedirs(db_dir, exist_ok=True)
            except OSError as exc:
                raise RuntimeError(f"Unable to create database directory '{db_dir}': {exc}") from exc

        try:
            self.conn = sqlite3.connect(path, check_same_thread=False)
        except sqlite3.OperationalError as exc:
            raise RuntimeError(f"Failed to open SQLite DB at '{path}': {exc}") from exc
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute("PRAGMA foreign_keys=ON;")
        for ddl in SCHEMA:
            self.conn.execute(ddl)
        self.conn.commit()

        self._lock = threading.RLock()
        self._depth = 0

        # Initialize operation classes - one per table (exact table names)
        self.meta = MetaOperations(self.conn)
        self.symbols = SymbolsOperations(self.conn)
        self.symbol_tags = SymbolTagsOperations(self.conn)
        self.containment = ContainmentOperations(self.conn)
        self.connections = ConnectionsOperations(self.conn)

        # Pre-alpha: no migrations, delete the DB on schema changes
        current_version = self.meta.get("schema_version")
        if not current_version:
            self.meta.set("schema_version", str(SCHEMA_VERSION))

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a group of writes atomically.

        Commits on success and rolls back if the block raises. Re-entrant
        within one thread; other threads wait for the outer block to finish.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self.conn
                finally:
                    self._depth -= 1
                return
            self._depth = 1
            try:
                with self.conn:
                    yield self.conn
            finally:
                self._depth = 0

    def close(self):
        """Close database connection."""
        self.conn.commit()
        self.conn.close()
