"""
Application composition root and dependency injection container.

This module defines the Application class, which owns the repository, the
services and the API facade for one symbol graph.

Architecture:
- Application owns: config, repository (and its Database when SQLite-backed), services, facade
- All configuration values come from an EngineConfig (no module-level config globals)
- Services are registered via register_service() during construction
- Access services via: app.get_service("name") or app.services["name"]
- There is no module-level singleton; construct an Application and pass it around
"""

from __future__ import annotations

import logging
from typing import Any

from symgraph.__version__ import __version__
from symgraph.helpers.dto.compatibility_dto import TypeCompatibilityMode
from symgraph.helpers.dto.config_dto import EngineConfig
from symgraph.helpers.logging_helper import configure_logging
from symgraph.interfaces.api.facade import SymbolGraphFacade
from symgraph.persistence.db import Database
from symgraph.persistence.memory_repository import MemorySymbolRepository
from symgraph.persistence.sqlite_repository import SqliteSymbolRepository
from symgraph.persistence.symbol_repository import SymbolRepository
from symgraph.services.config_svc import ConfigService
from symgraph.services.dependency_graph_svc import DependencyGraphService
from symgraph.services.symbol_table_svc import SymbolTableService
from symgraph.services.wiring_svc import WiringService

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  Application Class - Composition Root & DI Container
# ----------------------------------------------------------------------
class Application:
    """
    Composition root for a symbol graph.

    Args:
        config: Validated engine settings; when omitted they are loaded
            through ConfigService (defaults, YAML files, SYMGRAPH_* env vars)
        setup_logging: Call configure_logging() with config.log_level
    """

    def __init__(self, config: EngineConfig | None = None, setup_logging: bool = False):
        self._config_service: ConfigService | None = None
        if config is None:
            self._config_service = ConfigService()
            config = self._config_service.make_engine_config()
        self.config = config

        if setup_logging:
            configure_logging(config.log_level)

        self.db: Database | None = None
        self.repository = self._create_repository()

        self.symbol_table = SymbolTableService(self.repository)
        self.graph = DependencyGraphService(self.repository, include_structural=config.include_structural_edges)
        self.wiring = WiringService(
            self.repository,
            self.graph,
            type_mode=TypeCompatibilityMode(config.type_mode),
            check_cardinality=config.check_cardinality,
            reject_cycles=config.reject_cycles,
        )
        self.facade = SymbolGraphFacade(self.symbol_table, self.graph, self.wiring)

        self.services: dict[str, Any] = {}
        if self._config_service is not None:
            self.register_service("config", self._config_service)
        self.register_service("symbol_table", self.symbol_table)
        self.register_service("graph", self.graph)
        self.register_service("wiring", self.wiring)

        logger.info(
            f"[Application] symgraph {__version__} ready (repository={config.repository}, "
            f"type_mode={config.type_mode}, reject_cycles={config.reject_cycles})"
        )

    def _create_repository(self) -> SymbolRepository:
        if self.config.repository == "sqlite":
            logger.info(f"[Application] Opening SQLite repository at {self.config.db_path}")
            self.db = Database(self.config.db_path)
            return SqliteSymbolRepository(self.db)
        return MemorySymbolRepository()

    def register_service(self, name: str, service: Any) -> None:
        """
        Register a service in the DI container.

        Args:
            name: Service name (e.g., "symbol_table", "wiring")
            service: Service instance
        """
        self.services[name] = service

    def get_service(self, name: str) -> Any:
        """
        Get a service from the DI container.

        Raises:
            KeyError: If service not registered
        """
        if name not in self.services:
            raise KeyError(f"Service '{name}' not found. Available services: {list(self.services.keys())}")
        return self.services[name]

    def close(self) -> None:
        """Release the database connection, if any."""
        if self.db is not None:
            self.db.close()
            self.db = None
            logger.info("[Application] Closed database")

    def __enter__(self) -> Application:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
