"""
Curation Service - every mutation of the curation graph

Order of work for each mutation:
1. Parse input (pydantic) -> ValidationError before the store is touched
2. Call collaborators (metadata fetcher, disambiguator) outside any transaction
3. Open ONE graph transaction, run identity checks and writes through it
4. Commit; any exception rolls the whole unit back

Delete semantics:
- delete_entity / delete_source: DETACH, dependent quotes survive unlinked
- delete_quote: the quote only
- delete_report: quotes and sources go with it, entities only if no other
  report still links them
- delete_client: delete_report for every owned report, then the client
Deleting an absent id returns False and changes nothing.
"""
import logging
from typing import Any, List, Mapping, Optional, Tuple, Union

from curation_graph.errors import NotFoundError, ValidationError
from curation_graph.models.client import Client
from curation_graph.models.report import Report
from curation_graph.models.entity import Entity
from curation_graph.models.source import Source
from curation_graph.models.quote import Quote
from curation_graph.models.api import (
    ClientCreate,
    ClientUpdate,
    ReportCreate,
    ReportUpdate,
    EntityCreate,
    EntityUpdate,
    SourceCreate,
    SourceUpdate,
    QuoteCreate,
    QuoteUpdate,
    parse_input,
)
from curation_graph.repositories import (
    ClientRepository,
    ReportRepository,
    EntityRepository,
    SourceRepository,
    QuoteRepository,
)
from curation_graph.services.entity_disambiguator import EntityDisambiguator, EntitySuggestion
from curation_graph.services.identity_checker import IdentityChecker
from curation_graph.services.metadata_fetcher import MetadataFetcher
from curation_graph.services.neo4j_service import Neo4jService
from curation_graph.utils.id_generator import (
    generate_client_id,
    generate_report_id,
    generate_entity_id,
    generate_source_id,
    generate_quote_id,
)

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], Any]


class CurationService:
    """
    Relationship mutator for Clients, Reports, Entities, Sources and Quotes.

    Collaborators are created on first use unless injected.
    """

    def __init__(
        self,
        neo4j_service: Neo4jService,
        metadata_fetcher: Optional[MetadataFetcher] = None,
        disambiguator: Optional[EntityDisambiguator] = None,
    ):
        self.neo4j = neo4j_service
        self.identity = IdentityChecker(neo4j_service)

        self.clients = ClientRepository(neo4j_service)
        self.reports = ReportRepository(neo4j_service)
        self.entities = EntityRepository(neo4j_service)
        self.sources = SourceRepository(neo4j_service)
        self.quotes = QuoteRepository(neo4j_service)

        self._metadata_fetcher = metadata_fetcher
        self._disambiguator = disambiguator

    @property
    def metadata_fetcher(self) -> MetadataFetcher:
        if self._metadata_fetcher is None:
            self._metadata_fetcher = MetadataFetcher()
        return self._metadata_fetcher

    @property
    def disambiguator(self) -> EntityDisambiguator:
        if self._disambiguator is None:
            self._disambiguator = EntityDisambiguator()
        return self._disambiguator

    # ========================================================================
    # Clients & Reports
    # ========================================================================

    async def create_client(self, data: Payload) -> Client:
        payload = parse_input(ClientCreate, data)
        async with self.neo4j.transaction() as tx:
            return await self.clients.create(generate_client_id(), payload, tx)

    async def update_client(self, client_id: str, data: Payload) -> Client:
        payload = parse_input(ClientUpdate, data)
        async with self.neo4j.transaction() as tx:
            client = await self.clients.update(client_id, payload.changes(), tx)
        if client is None:
            raise NotFoundError('Client', client_id)
        logger.info(f"Updated Client {client_id}: {sorted(payload.changes())}")
        return client

    async def create_report(self, client_id: str, title: str, content: Optional[str] = None) -> Report:
        payload = parse_input(ReportCreate, {'title': title, 'content': content})
        async with self.neo4j.transaction() as tx:
            if not await self.identity.client_exists(client_id, tx):
                raise NotFoundError('Client', client_id)
            return await self.reports.create(generate_report_id(), client_id, payload, tx)

    async def update_report(self, report_id: str, data: Payload) -> Report:
        payload = parse_input(ReportUpdate, data)
        async with self.neo4j.transaction() as tx:
            report = await self.reports.update(report_id, payload.changes(), tx)
        if report is None:
            raise NotFoundError('Report', report_id)
        return report

    # ========================================================================
    # Entities
    # ========================================================================

    async def create_entity(self, report_id: str, data: Payload) -> Entity:
        """
        Resolve-or-create an entity by exact (name, type) and link it to the report.

        An existing entity is reused; optional fields are merged onto it only
        when supplied, its status is left as is.
        """
        payload = parse_input(EntityCreate, data)

        async with self.neo4j.transaction() as tx:
            if not await self.identity.report_exists(report_id, tx):
                raise NotFoundError('Report', report_id)

            existing = await self.identity.find_entity(payload.name, payload.type, tx)
            if existing:
                return await self.entities.link_to_report(report_id, existing.id, payload, tx)
            return await self.entities.create(report_id, generate_entity_id(), payload, tx)

    async def suggest_entities(self, report_id: str, name: str) -> List[EntitySuggestion]:
        """Ask the disambiguator, using the owning client's context and niches."""
        if not name or not name.strip():
            raise ValidationError('name', 'Entity name is required')

        client = await self.clients.get_by_report(report_id)
        if client is None:
            raise NotFoundError('Report', report_id)

        return await self.disambiguator.suggest(name.strip(), client.context, client.niches)

    async def update_entity(self, entity_id: str, fields: Payload) -> Entity:
        payload = parse_input(EntityUpdate, fields)
        async with self.neo4j.transaction() as tx:
            entity = await self.entities.update(entity_id, payload.changes(), tx)
        if entity is None:
            raise NotFoundError('Entity', entity_id)
        logger.info(f"Updated Entity {entity_id}: {sorted(payload.changes())}")
        return entity

    async def delete_entity(self, entity_id: str) -> bool:
        async with self.neo4j.transaction() as tx:
            deleted = await self.entities.delete(entity_id, tx)
        if deleted:
            logger.info(f"🗑️ Deleted Entity {entity_id}")
        return deleted

    # ========================================================================
    # Sources
    # ========================================================================

    async def create_source(
        self, report_id: str, url: str, overrides: Optional[Mapping[str, Any]] = None
    ) -> Source:
        """
        Create a source from a URL.

        Metadata is fetched before the write transaction opens (fallback
        record on failure). Caller overrides win over fetched values.
        """
        payload = parse_input(SourceCreate, {**dict(overrides or {}), 'url': url})

        if not await self.identity.report_exists(report_id):
            raise NotFoundError('Report', report_id)

        metadata = await self.metadata_fetcher.fetch(payload.url)

        fields = metadata.to_dict()
        fields.update(payload.overrides())
        fields['url'] = payload.url
        fields['status'] = payload.status.value

        async with self.neo4j.transaction() as tx:
            # Report may have been deleted while fetching
            if not await self.identity.report_exists(report_id, tx):
                raise NotFoundError('Report', report_id)
            return await self.sources.create(report_id, generate_source_id(), fields, tx)

    async def update_source(self, source_id: str, fields: Payload) -> Source:
        payload = parse_input(SourceUpdate, fields)
        async with self.neo4j.transaction() as tx:
            source = await self.sources.update(source_id, payload.changes(), tx)
        if source is None:
            raise NotFoundError('Source', source_id)
        logger.info(f"Updated Source {source_id}: {sorted(payload.changes())}")
        return source

    async def delete_source(self, source_id: str) -> bool:
        async with self.neo4j.transaction() as tx:
            deleted = await self.sources.delete(source_id, tx)
        if deleted:
            logger.info(f"🗑️ Deleted Source {source_id}")
        return deleted

    # ========================================================================
    # Quotes
    # ========================================================================

    async def create_quote(self, report_id: str, data: Payload) -> Quote:
        """
        Create a quote under a report.

        Raises:
            NotFoundError: report absent
            ReferentialError: entity_id / source_id not linked from the report
        """
        payload = parse_input(QuoteCreate, data)

        async with self.neo4j.transaction() as tx:
            await self.identity.check_quote_references(
                report_id, payload.entity_id, payload.source_id, tx
            )
            return await self.quotes.create(report_id, generate_quote_id(), payload, tx)

    async def update_quote(self, quote_id: str, fields: Payload) -> Quote:
        """Update text and flags. Published implies approved (see QuoteUpdate)."""
        payload = parse_input(QuoteUpdate, fields)
        async with self.neo4j.transaction() as tx:
            quote = await self.quotes.update(quote_id, payload.changes(), tx)
        if quote is None:
            raise NotFoundError('Quote', quote_id)
        logger.info(f"Updated Quote {quote_id} [{quote.status.value}]")
        return quote

    async def link_quote_to_source(self, quote_id: str, source_id: str) -> Quote:
        async with self.neo4j.transaction() as tx:
            await self.identity.check_citation(quote_id, source_id, tx)
            quote = await self.quotes.set_source(quote_id, source_id, tx)
        logger.info(f"🔗 Quote {quote_id} now cites {source_id}")
        return quote

    async def delete_quote(self, quote_id: str) -> bool:
        async with self.neo4j.transaction() as tx:
            deleted = await self.quotes.delete(quote_id, tx)
        if deleted:
            logger.info(f"🗑️ Deleted Quote {quote_id}")
        return deleted

    # ========================================================================
    # Cascades
    # ========================================================================

    async def delete_report(self, report_id: str) -> bool:
        async with self.neo4j.transaction() as tx:
            if not await self.identity.report_exists(report_id, tx):
                return False
            await self.reports.cascade_delete([report_id], tx)
        return True

    async def delete_client(self, client_id: str) -> bool:
        async with self.neo4j.transaction() as tx:
            if not await self.identity.client_exists(client_id, tx):
                return False
            report_ids = await self.clients.get_report_ids(client_id, tx)
            await self.reports.cascade_delete(report_ids, tx)
            await self.clients.delete(client_id, tx)
        logger.info(f"🗑️ Deleted Client {client_id} with {len(report_ids)} report(s)")
        return True

    # ========================================================================
    # Reads
    # ========================================================================

    async def get_client(self, client_id: str) -> Optional[Client]:
        return await self.clients.get_by_id(client_id)

    async def list_clients(self) -> List[Client]:
        return await self.clients.list_all()

    async def get_client_with_reports(self, client_id: str) -> Optional[Tuple[Client, List[Report]]]:
        return await self.clients.get_with_reports(client_id)

    async def get_report(self, report_id: str) -> Optional[Report]:
        return await self.reports.get_by_id(report_id)

    async def get_entity(self, entity_id: str) -> Optional[Entity]:
        return await self.entities.get_by_id(entity_id)

    async def get_source(self, source_id: str) -> Optional[Source]:
        return await self.sources.get_by_id(source_id)

    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        return await self.quotes.get_by_id(quote_id)
