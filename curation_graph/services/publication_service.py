"""
Publication Service - read-side views of the curation graph

Internal views list a report's quotes/sources/entities with an optional
status filter. Portal views return only published content and validate the
Client -> Report chain first:

    broken chain        -> NotFoundError("Client-Report chain not found")
    valid chain, no data -> []

Quote status comes from resolve_quote_status() on every read; Entity and
Source status is the stored literal.
"""
import logging
from typing import List, Optional

from curation_graph.errors import NotFoundError
from curation_graph.models.entity import Entity
from curation_graph.models.source import Source
from curation_graph.models.quote import Quote
from curation_graph.models.status import PublicationStatus, parse_status_filter
from curation_graph.repositories import EntityRepository, SourceRepository, QuoteRepository
from curation_graph.services.identity_checker import IdentityChecker
from curation_graph.services.neo4j_service import GraphTransaction, Neo4jService

logger = logging.getLogger(__name__)

CHAIN_NOT_FOUND = 'Client-Report chain not found'


class PublicationService:

    def __init__(self, neo4j_service: Neo4jService):
        self.neo4j = neo4j_service
        self.identity = IdentityChecker(neo4j_service)
        self.entities = EntityRepository(neo4j_service)
        self.sources = SourceRepository(neo4j_service)
        self.quotes = QuoteRepository(neo4j_service)

    async def _require_report(
        self, report_id: str, client_id: Optional[str], tx: GraphTransaction
    ) -> None:
        if client_id is not None:
            if not await self.identity.report_belongs_to_client(client_id, report_id, tx):
                raise NotFoundError('Report', report_id, message=CHAIN_NOT_FOUND)
        elif not await self.identity.report_exists(report_id, tx):
            raise NotFoundError('Report', report_id)

    async def get_all_quotes_with_status(
        self, report_id: str, status=None, client_id: Optional[str] = None
    ) -> List[Quote]:
        """All quotes of a report, newest first, optionally filtered by derived status."""
        stage = parse_status_filter(status)
        async with self.neo4j.transaction() as tx:
            await self._require_report(report_id, client_id, tx)
            quotes = await self.quotes.list_by_report(report_id, tx)

        if stage is not None:
            quotes = [quote for quote in quotes if quote.status.stage == stage]
        logger.debug(f"{len(quotes)} quote(s) for report {report_id} (status={stage})")
        return quotes

    async def get_sources(self, report_id: str, status=None) -> List[Source]:
        stage = parse_status_filter(status)
        async with self.neo4j.transaction() as tx:
            await self._require_report(report_id, None, tx)
            return await self.sources.list_by_report(report_id, stage, tx)

    async def get_report_entities(self, report_id: str, status=None) -> List[Entity]:
        stage = parse_status_filter(status)
        async with self.neo4j.transaction() as tx:
            await self._require_report(report_id, None, tx)
            return await self.entities.list_by_report(report_id, stage, tx)

    # ========================================================================
    # Portal
    # ========================================================================

    async def get_published_quotes(self, client_id: str, report_id: str) -> List[Quote]:
        """Published quotes of a report, scoped to its owning client."""
        return await self.get_all_quotes_with_status(
            report_id, PublicationStatus.PUBLISHED, client_id=client_id
        )

    async def get_published_sources(self, report_id: str, client_id: Optional[str] = None) -> List[Source]:
        async with self.neo4j.transaction() as tx:
            await self._require_report(report_id, client_id, tx)
            return await self.sources.list_by_report(report_id, PublicationStatus.PUBLISHED, tx)

    async def get_published_entities(self, report_id: str, client_id: Optional[str] = None) -> List[Entity]:
        async with self.neo4j.transaction() as tx:
            await self._require_report(report_id, client_id, tx)
            return await self.entities.list_by_report(report_id, PublicationStatus.PUBLISHED, tx)

    # ========================================================================
    # Reverse traversal from a Source
    # ========================================================================

    async def get_quotes_from_source(self, source_id: str) -> List[Quote]:
        async with self.neo4j.transaction() as tx:
            if not await self.identity.source_exists(source_id, tx):
                raise NotFoundError('Source', source_id)
            return await self.quotes.list_by_source(source_id, tx)

    async def get_entities_from_source(self, source_id: str) -> List[Entity]:
        """Distinct speakers of quotes citing the source."""
        async with self.neo4j.transaction() as tx:
            if not await self.identity.source_exists(source_id, tx):
                raise NotFoundError('Source', source_id)
            return await self.entities.list_by_source(source_id, tx)
