"""
Identity & Existence Checker

Answers "does X exist / is X reachable from Y" questions for the mutator.
Every check accepts the caller's open transaction so it reads the same
snapshot the write will commit against.
"""
import logging
from typing import Optional

from curation_graph.errors import NotFoundError, ReferentialError
from curation_graph.models.entity import Entity, EntityType
from curation_graph.services.neo4j_service import GraphTransaction, Neo4jService

logger = logging.getLogger(__name__)

_LABELS = ('Client', 'Report', 'Entity', 'Source', 'Quote')


class IdentityChecker:

    def __init__(self, neo4j_service: Neo4jService):
        self.neo4j = neo4j_service

    async def _single(self, query: str, parameters: dict, tx: Optional[GraphTransaction]):
        if tx is not None:
            return await tx.single(query, parameters)
        async with self.neo4j.transaction() as own:
            return await own.single(query, parameters)

    async def find_entity(
        self, name: str, entity_type, tx: GraphTransaction = None
    ) -> Optional[Entity]:
        """Exact (name, type) match. No case folding, no fuzzy matching."""
        type_value = entity_type.value if isinstance(entity_type, EntityType) else entity_type
        row = await self._single("""
            MATCH (e:Entity {name: $name, type: $type})
            RETURN e {.*} AS entity
            ORDER BY e.created_at
            LIMIT 1
        """, {'name': name, 'type': type_value}, tx)

        if not row:
            logger.debug(f"No entity for ({name}, {type_value})")
            return None
        return Entity.from_neo4j(row['entity'])

    async def _exists(self, label: str, node_id: str, tx: Optional[GraphTransaction]) -> bool:
        if label not in _LABELS:
            raise ValueError(f"Unknown label: {label}")
        if not node_id:
            return False
        row = await self._single(
            f"MATCH (n:{label} {{id: $id}}) RETURN count(n) > 0 AS found",
            {'id': node_id}, tx
        )
        return bool(row and row['found'])

    async def client_exists(self, client_id: str, tx: GraphTransaction = None) -> bool:
        return await self._exists('Client', client_id, tx)

    async def report_exists(self, report_id: str, tx: GraphTransaction = None) -> bool:
        return await self._exists('Report', report_id, tx)

    async def entity_exists(self, entity_id: str, tx: GraphTransaction = None) -> bool:
        return await self._exists('Entity', entity_id, tx)

    async def source_exists(self, source_id: str, tx: GraphTransaction = None) -> bool:
        return await self._exists('Source', source_id, tx)

    async def quote_exists(self, quote_id: str, tx: GraphTransaction = None) -> bool:
        return await self._exists('Quote', quote_id, tx)

    async def report_belongs_to_client(
        self, client_id: str, report_id: str, tx: GraphTransaction = None
    ) -> bool:
        if not client_id or not report_id:
            return False
        row = await self._single("""
            MATCH (r:Report {id: $report_id})-[:BELONGS_TO]->(c:Client {id: $client_id})
            RETURN count(r) > 0 AS found
        """, {'client_id': client_id, 'report_id': report_id}, tx)
        return bool(row and row['found'])

    async def check_quote_references(
        self,
        report_id: str,
        entity_id: Optional[str],
        source_id: Optional[str],
        tx: GraphTransaction = None,
    ) -> None:
        """
        Verify a quote's report exists and its speaker/citation hang off it.

        Raises:
            NotFoundError: report absent
            ReferentialError: entity_id (or source_id) given but not linked
                from the report, whether the node is absent or belongs
                elsewhere
        """
        row = await self._single("""
            OPTIONAL MATCH (r:Report {id: $report_id})
            OPTIONAL MATCH (r)-[:HAS_ENTITY]->(e:Entity {id: $entity_id})
            OPTIONAL MATCH (r)-[:HAS_SOURCE]->(s:Source {id: $source_id})
            RETURN r IS NOT NULL AS report_found,
                   e IS NOT NULL AS entity_found,
                   s IS NOT NULL AS source_found
            LIMIT 1
        """, {'report_id': report_id, 'entity_id': entity_id, 'source_id': source_id}, tx)

        if not row or not row['report_found']:
            raise NotFoundError('Report', report_id)
        if entity_id and not row['entity_found']:
            raise ReferentialError('Entity', entity_id)
        if source_id and not row['source_found']:
            raise ReferentialError('Source', source_id)

    async def check_citation(self, quote_id: str, source_id: str, tx: GraphTransaction = None) -> None:
        """
        Verify a source can be cited by a quote (same report).

        Raises:
            NotFoundError: quote or source absent
            ReferentialError: source not linked from the quote's report
        """
        row = await self._single("""
            OPTIONAL MATCH (q:Quote {id: $quote_id})
            OPTIONAL MATCH (s:Source {id: $source_id})
            OPTIONAL MATCH (r:Report)-[:HAS_QUOTE]->(q)
            OPTIONAL MATCH (r)-[:HAS_SOURCE]->(reachable:Source {id: $source_id})
            RETURN q IS NOT NULL AS quote_found,
                   s IS NOT NULL AS source_found,
                   reachable IS NOT NULL AS reachable
            LIMIT 1
        """, {'quote_id': quote_id, 'source_id': source_id}, tx)

        if not row or not row['quote_found']:
            raise NotFoundError('Quote', quote_id)
        if not row['source_found']:
            raise NotFoundError('Source', source_id)
        if not row['reachable']:
            raise ReferentialError('Source', source_id)
