"""
Pytest fixtures and configuration for the test suite.

Strategy:
- Use real repositories (in-memory dict store and SQLite) instead of mocks
- Build symbols through tests/factories.py so tests only state what they care about
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add project root to path so tests can import symgraph package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from symgraph.app import Application  # noqa: E402
from symgraph.helpers.dto.config_dto import EngineConfig  # noqa: E402
from symgraph.persistence.db import Database  # noqa: E402
from symgraph.persistence.memory_repository import MemorySymbolRepository  # noqa: E402
from symgraph.persistence.sqlite_repository import SqliteSymbolRepository  # noqa: E402
from symgraph.services.dependency_graph_svc import DependencyGraphService  # noqa: E402
from symgraph.services.symbol_table_svc import SymbolTableService  # noqa: E402
from symgraph.services.wiring_svc import WiringService  # noqa: E402


# === REPOSITORIES ===
@pytest.fixture
def memory_repo() -> MemorySymbolRepository:
    return MemorySymbolRepository()


@pytest.fixture
def in_memory_db() -> Generator[Database, None, None]:
    """Provide an in-memory SQLite Database."""
    db = Database(":memory:")
    yield db
    db.close()


@pytest.fixture
def sqlite_repo(in_memory_db: Database) -> SqliteSymbolRepository:
    return SqliteSymbolRepository(in_memory_db)


@pytest.fixture(params=["memory", "sqlite"])
def any_repo(request, tmp_path):
    """Run a test once against each repository implementation."""
    if request.param == "memory":
        yield MemorySymbolRepository()
        return
    db = Database(str(tmp_path / "symgraph.sqlite"))
    yield SqliteSymbolRepository(db)
    db.close()


# === SERVICES ===
@pytest.fixture
def symbol_table(memory_repo: MemorySymbolRepository) -> SymbolTableService:
    return SymbolTableService(memory_repo)


@pytest.fixture
def graph_service(memory_repo: MemorySymbolRepository) -> DependencyGraphService:
    return DependencyGraphService(memory_repo)


@pytest.fixture
def wiring_service(memory_repo: MemorySymbolRepository, graph_service: DependencyGraphService) -> WiringService:
    return WiringService(memory_repo, graph_service)


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(
        repository="memory",
        db_path=":memory:",
        type_mode="compatible",
        check_cardinality=True,
        reject_cycles=False,
        include_structural_edges=False,
        log_level="INFO",
    )


@pytest.fixture
def application(engine_config: EngineConfig) -> Generator[Application, None, None]:
    app = Application(engine_config)
    yield app
    app.close()
