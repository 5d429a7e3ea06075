"""
Services package.
"""

from .config_svc import ConfigService
from .dependency_graph_svc import DependencyGraphService
from .symbol_table_svc import SymbolTableService
from .wiring_svc import WiringService

__all__ = [
    "ConfigService",
    "DependencyGraphService",
    "SymbolTableService",
    "WiringService",
]
