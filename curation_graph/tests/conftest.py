"""
Pytest configuration for curation graph tests.

Unit tests run against FakeNeo4j: transaction() yields an AsyncMock with
the GraphTransaction interface (read / single / write) and records whether
the block committed or rolled back.
"""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from curation_graph.config.settings import reset_settings

pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test."
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring Neo4j"
    )


def write_counters(nodes_deleted: int = 0, **extra) -> dict:
    counters = {
        'nodes_created': 0,
        'nodes_deleted': nodes_deleted,
        'relationships_created': 0,
        'relationships_deleted': 0,
        'properties_set': 0,
    }
    counters.update(extra)
    return counters


class FakeNeo4j:
    """Stand-in for Neo4jService with a scripted transaction."""

    def __init__(self):
        self.tx = AsyncMock()
        self.tx.read.return_value = []
        self.tx.single.return_value = None
        self.tx.write.return_value = write_counters()
        self.commits = 0
        self.rollbacks = 0

    def deletes(self, nodes_deleted: int) -> None:
        """Script every write() to report nodes_deleted."""
        self.tx.write.return_value = write_counters(nodes_deleted)

    @asynccontextmanager
    async def transaction(self):
        try:
            yield self.tx
        except Exception:
            self.rollbacks += 1
            raise
        self.commits += 1


@pytest.fixture
def fake_neo4j():
    return FakeNeo4j()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Settings come from defaults, never from a developer's .env."""
    monkeypatch.setenv('OPENAI_API_KEY', '')
    reset_settings()
    yield
    reset_settings()
