"""
Database operations package.

Contains table-specific operations classes (one per table).
Each *_sql.py file owns all SQL for that specific table.
"""

from .connections_sql import ConnectionsOperations
from .containment_sql import ContainmentOperations
from .meta_sql import MetaOperations
from .symbol_tags_sql import SymbolTagsOperations
from .symbols_sql import SymbolsOperations

__all__ = [
    "ConnectionsOperations",
    "ContainmentOperations",
    "MetaOperations",
    "SymbolTagsOperations",
    "SymbolsOperations",
]
