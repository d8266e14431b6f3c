"""
Pytest configuration and shared fixtures for schema-designer tests.
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from schema_designer.graph import SchemaGraph, Table
from schema_designer.manager import SchemaGraphManager

# Keep each in-memory database small; tests open many of them
TEST_BUFFER_POOL_SIZE = 64 * 1024 * 1024
TEST_MAX_DB_SIZE = 1 << 30


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after test.

    Yields:
        Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_db_path(temp_dir: Path) -> Path:
    """Provide a temporary database path for testing.

    Args:
        temp_dir: Temporary directory fixture

    Returns:
        Path to temporary database
    """
    return temp_dir / "test_schema.db"


@pytest.fixture
def graph() -> Generator[SchemaGraph, None, None]:
    """Provide an empty in-memory schema graph.

    Yields:
        SchemaGraph closed after the test
    """
    schema_graph = SchemaGraph(
        buffer_pool_size=TEST_BUFFER_POOL_SIZE,
        max_db_size=TEST_MAX_DB_SIZE,
    )
    yield schema_graph
    schema_graph.close()


@pytest.fixture
def manager(graph: SchemaGraph) -> SchemaGraphManager:
    """Provide a manager over the in-memory graph with a fixed clock.

    Args:
        graph: In-memory graph fixture

    Returns:
        SchemaGraphManager
    """
    return SchemaGraphManager(graph, clock=lambda: 1_700_000_000_000)


@pytest.fixture
def make_table(manager: SchemaGraphManager) -> Callable[[str], Table]:
    """Provide a factory creating a named table at its own pointer position.

    Args:
        manager: Manager fixture

    Returns:
        Callable taking a table name and returning the created table
    """
    created = []

    def _make(name: str) -> Table:
        manager.set_pointer(len(created) * 300, 40)
        table = manager.create_table()
        created.append(table)
        return manager.rename_table(table.id, name)

    return _make


@pytest.fixture
def user_and_post(manager: SchemaGraphManager, make_table) -> tuple:
    """Create tables ``User`` and ``Post``.

    Returns:
        Tuple of (user, post) tables
    """
    return make_table("User"), make_table("Post")
