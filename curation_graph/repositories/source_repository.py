"""
Source Repository - Neo4j storage for sources

Each Source is owned by one Report through HAS_SOURCE. Quotes cite it via
(Quote)-[:CITES]->(Source).
"""
import logging
from typing import Dict, List, Optional

from curation_graph.models.source import Source
from curation_graph.models.status import PublicationStatus
from curation_graph.repositories.base import GraphRepository
from curation_graph.services.neo4j_service import GraphTransaction

logger = logging.getLogger(__name__)

SOURCE_FIELDS = ('url', 'title', 'author', 'published_at', 'type', 'description', 'thumbnail', 'status')


class SourceRepository(GraphRepository):
    """Repository for Source domain model"""

    async def create(
        self, report_id: str, source_id: str, fields: Dict, tx: GraphTransaction = None
    ) -> Optional[Source]:
        """
        Create a source under a report.

        Args:
            fields: resolved source properties (metadata merged with overrides)

        Returns:
            Source, or None if the report does not exist
        """
        properties = {key: fields.get(key) for key in SOURCE_FIELDS}
        properties['id'] = source_id

        row = await self._single("""
            MATCH (r:Report {id: $report_id})
            CREATE (s:Source)
            SET s = $properties, s.created_at = datetime()
            CREATE (r)-[:HAS_SOURCE]->(s)
            RETURN s {.*} AS source
        """, {'report_id': report_id, 'properties': properties}, tx)

        if not row:
            return None

        source = Source.from_neo4j(row['source'])
        logger.info(f"📄 Created Source: {source.title} ({source.id}) in report {report_id}")
        return source

    async def get_by_id(self, source_id: str, tx: GraphTransaction = None) -> Optional[Source]:
        row = await self._single("""
            MATCH (s:Source {id: $id})
            RETURN s {.*} AS source
        """, {'id': source_id}, tx)
        return Source.from_neo4j(row['source']) if row else None

    async def list_by_report(
        self, report_id: str, status: Optional[PublicationStatus] = None, tx: GraphTransaction = None
    ) -> List[Source]:
        rows = await self._read("""
            MATCH (:Report {id: $report_id})-[:HAS_SOURCE]->(s:Source)
            WHERE $status IS NULL OR coalesce(s.status, 'pending') = $status
            RETURN s {.*} AS source
            ORDER BY s.created_at DESC
        """, {'report_id': report_id, 'status': status.value if status else None}, tx)
        return [Source.from_neo4j(row['source']) for row in rows]

    async def update(self, source_id: str, changes: dict, tx: GraphTransaction = None) -> Optional[Source]:
        row = await self._single("""
            MATCH (s:Source {id: $id})
            SET s += $changes, s.updated_at = datetime()
            RETURN s {.*} AS source
        """, {'id': source_id, 'changes': changes}, tx)
        return Source.from_neo4j(row['source']) if row else None

    async def delete(self, source_id: str, tx: GraphTransaction = None) -> bool:
        """Delete source; citing quotes survive without a citation."""
        counters = await self._write("""
            MATCH (s:Source {id: $id})
            DETACH DELETE s
        """, {'id': source_id}, tx)
        return counters['nodes_deleted'] > 0

