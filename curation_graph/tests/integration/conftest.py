"""
Fixtures for integration tests against a real Neo4j.

Usage:
    TEST_NEO4J_URI=bolt://localhost:7688 pytest -m integration

Every test starts from an empty curation graph. Tests are skipped when the
test database cannot be reached.
"""
import os
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from curation_graph.errors import StoreError
from curation_graph.models.source import SourceType
from curation_graph.services.curation_service import CurationService
from curation_graph.services.metadata_fetcher import SourceMetadata
from curation_graph.services.neo4j_service import Neo4jService
from curation_graph.services.publication_service import PublicationService


@pytest_asyncio.fixture
async def graph():
    """Connected Neo4jService over a freshly cleared curation graph."""
    service = Neo4jService(
        uri=os.getenv("TEST_NEO4J_URI", "bolt://localhost:7688"),
        user=os.getenv("TEST_NEO4J_USER", "neo4j"),
        password=os.getenv("TEST_NEO4J_PASSWORD", "test_password"),
        database=os.getenv("TEST_NEO4J_DATABASE", "neo4j"),
    )
    try:
        await service.connect()
    except StoreError as e:
        pytest.skip(f"Cannot connect to test Neo4j: {e}")

    async def clear():
        async with service.transaction() as tx:
            await tx.write("""
                MATCH (n)
                WHERE n:Client OR n:Report OR n:Entity OR n:Source OR n:Quote
                DETACH DELETE n
            """)

    await clear()
    try:
        yield service
    finally:
        await clear()
        await service.close()


@pytest.fixture
def fetcher():
    """Metadata fetcher that never touches the network."""
    fetcher = AsyncMock()
    fetcher.fetch.side_effect = lambda url: SourceMetadata(
        url=url, title=f"Title of {url}", type=SourceType.ARTICLE
    )
    return fetcher


@pytest.fixture
def curation(graph, fetcher):
    return CurationService(graph, metadata_fetcher=fetcher, disambiguator=AsyncMock())


@pytest.fixture
def publication(graph):
    return PublicationService(graph)
