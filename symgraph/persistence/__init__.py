"""
Persistence package.
"""

from .db import SCHEMA, SCHEMA_VERSION, Database
from .memory_repository import MemorySymbolRepository
from .sqlite_repository import SqliteSymbolRepository
from .symbol_repository import SymbolRepository

__all__ = [
    "SCHEMA",
    "SCHEMA_VERSION",
    "Database",
    "MemorySymbolRepository",
    "SqliteSymbolRepository",
    "SymbolRepository",
]
