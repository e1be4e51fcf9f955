"""
Report Repository - Neo4j storage for reports and the report cascade

Ownership table used by cascade_delete():
- Quote  (HAS_QUOTE)  -> deleted with the report
- Source (HAS_SOURCE) -> deleted with the report
- Entity (HAS_ENTITY) -> edge removed; node deleted only when no surviving
                         report still links it
"""
import logging
from typing import Dict, List, Optional

from curation_graph.models.report import Report
from curation_graph.models.api import ReportCreate
from curation_graph.repositories.base import GraphRepository
from curation_graph.services.neo4j_service import GraphTransaction

logger = logging.getLogger(__name__)


class ReportRepository(GraphRepository):
    """Repository for Report domain model"""

    async def create(
        self, report_id: str, client_id: str, data: ReportCreate, tx: GraphTransaction = None
    ) -> Optional[Report]:
        """Create a report under a client. None if the client does not exist."""
        row = await self._single("""
            MATCH (c:Client {id: $client_id})
            CREATE (r:Report {id: $id, title: $title, content: $content, created_at: datetime()})
            CREATE (r)-[:BELONGS_TO]->(c)
            RETURN r {.*} AS report, c.id AS client_id
        """, {
            'id': report_id,
            'client_id': client_id,
            'title': data.title,
            'content': data.content,
        }, tx)

        if not row:
            return None

        report = Report.from_neo4j(row['report'], client_id=row['client_id'])
        logger.info(f"Created Report: {report.title} ({report.id}) for client {client_id}")
        return report

    async def get_by_id(self, report_id: str, tx: GraphTransaction = None) -> Optional[Report]:
        row = await self._single("""
            MATCH (r:Report {id: $id})
            OPTIONAL MATCH (r)-[:BELONGS_TO]->(c:Client)
            RETURN r {.*} AS report, c.id AS client_id
            LIMIT 1
        """, {'id': report_id}, tx)
        return Report.from_neo4j(row['report'], client_id=row['client_id']) if row else None

    async def update(self, report_id: str, changes: dict, tx: GraphTransaction = None) -> Optional[Report]:
        row = await self._single("""
            MATCH (r:Report {id: $id})
            SET r += $changes, r.updated_at = datetime()
            WITH r
            OPTIONAL MATCH (r)-[:BELONGS_TO]->(c:Client)
            RETURN r {.*} AS report, c.id AS client_id
            LIMIT 1
        """, {'id': report_id, 'changes': changes}, tx)
        return Report.from_neo4j(row['report'], client_id=row['client_id']) if row else None

    async def cascade_delete(self, report_ids: List[str], tx: GraphTransaction) -> Dict[str, int]:
        """
        Delete reports with everything they exclusively own.

        Must run inside the caller's transaction: the four statements are one
        unit, a reader never sees a report without its quotes but with its
        sources.
        """
        if not report_ids:
            return {'reports': 0, 'quotes': 0, 'sources': 0, 'entities': 0}

        params = {'report_ids': report_ids}

        quotes = await tx.write("""
            MATCH (r:Report)-[:HAS_QUOTE]->(q:Quote)
            WHERE r.id IN $report_ids
            DETACH DELETE q
        """, params)

        sources = await tx.write("""
            MATCH (r:Report)-[:HAS_SOURCE]->(s:Source)
            WHERE r.id IN $report_ids
            DETACH DELETE s
        """, params)

        # Entities still linked from a surviving report keep living there
        entities = await tx.write("""
            MATCH (r:Report)-[:HAS_ENTITY]->(e:Entity)
            WHERE r.id IN $report_ids
            WITH DISTINCT e
            WHERE NOT EXISTS {
                MATCH (other:Report)-[:HAS_ENTITY]->(e)
                WHERE NOT other.id IN $report_ids
            }
            DETACH DELETE e
        """, params)

        reports = await tx.write("""
            MATCH (r:Report)
            WHERE r.id IN $report_ids
            DETACH DELETE r
        """, params)

        stats = {
            'reports': reports['nodes_deleted'],
            'quotes': quotes['nodes_deleted'],
            'sources': sources['nodes_deleted'],
            'entities': entities['nodes_deleted'],
        }
        logger.info(f"Cascade-deleted reports {report_ids}: {stats}")
        return stats
