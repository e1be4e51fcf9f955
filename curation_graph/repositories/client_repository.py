"""
Client Repository - Neo4j storage for clients

A Client owns Reports through (Report)-[:BELONGS_TO]->(Client).
Deleting a client's reports (with their cascade) is ReportRepository's job;
delete() here only removes the client node itself.
"""
import logging
from typing import List, Optional, Tuple

from curation_graph.models.client import Client
from curation_graph.models.report import Report
from curation_graph.models.api import ClientCreate
from curation_graph.repositories.base import GraphRepository
from curation_graph.services.neo4j_service import GraphTransaction

logger = logging.getLogger(__name__)


class ClientRepository(GraphRepository):
    """Repository for Client domain model"""

    async def create(self, client_id: str, data: ClientCreate, tx: GraphTransaction = None) -> Client:
        row = await self._single("""
            CREATE (c:Client {
                id: $id,
                name: $name,
                context: $context,
                niches: $niches,
                interests: $interests,
                mandatory_sources: $mandatory_sources,
                language: $language,
                created_at: datetime()
            })
            RETURN c {.*} AS client
        """, {'id': client_id, **data.model_dump()}, tx)

        client = Client.from_neo4j(row['client'])
        logger.info(f"Created Client: {client.name} ({client.id})")
        return client

    async def get_by_id(self, client_id: str, tx: GraphTransaction = None) -> Optional[Client]:
        row = await self._single("""
            MATCH (c:Client {id: $id})
            RETURN c {.*} AS client
        """, {'id': client_id}, tx)
        return Client.from_neo4j(row['client']) if row else None

    async def get_by_report(self, report_id: str, tx: GraphTransaction = None) -> Optional[Client]:
        """Owning client of a report"""
        row = await self._single("""
            MATCH (:Report {id: $report_id})-[:BELONGS_TO]->(c:Client)
            RETURN c {.*} AS client
            LIMIT 1
        """, {'report_id': report_id}, tx)
        return Client.from_neo4j(row['client']) if row else None

    async def list_all(self, tx: GraphTransaction = None) -> List[Client]:
        rows = await self._read("""
            MATCH (c:Client)
            RETURN c {.*} AS client
            ORDER BY c.name
        """, {}, tx)
        return [Client.from_neo4j(row['client']) for row in rows]

    async def get_with_reports(
        self, client_id: str, tx: GraphTransaction = None
    ) -> Optional[Tuple[Client, List[Report]]]:
        row = await self._single("""
            MATCH (c:Client {id: $id})
            OPTIONAL MATCH (r:Report)-[:BELONGS_TO]->(c)
            WITH c, r ORDER BY r.created_at DESC
            RETURN c {.*} AS client, collect(r {.*}) AS reports
        """, {'id': client_id}, tx)

        if not row:
            return None

        client = Client.from_neo4j(row['client'])
        reports = [Report.from_neo4j(r, client_id=client.id) for r in row['reports'] or []]
        return client, reports

    async def update(self, client_id: str, changes: dict, tx: GraphTransaction = None) -> Optional[Client]:
        row = await self._single("""
            MATCH (c:Client {id: $id})
            SET c += $changes, c.updated_at = datetime()
            RETURN c {.*} AS client
        """, {'id': client_id, 'changes': changes}, tx)
        return Client.from_neo4j(row['client']) if row else None

    async def get_report_ids(self, client_id: str, tx: GraphTransaction = None) -> List[str]:
        rows = await self._read("""
            MATCH (r:Report)-[:BELONGS_TO]->(:Client {id: $id})
            RETURN r.id AS id
        """, {'id': client_id}, tx)
        return [row['id'] for row in rows]

    async def delete(self, client_id: str, tx: GraphTransaction = None) -> bool:
        counters = await self._write("""
            MATCH (c:Client {id: $id})
            DETACH DELETE c
        """, {'id': client_id}, tx)
        return counters['nodes_deleted'] > 0
