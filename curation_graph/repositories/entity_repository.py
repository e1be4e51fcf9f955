"""
Entity Repository - Neo4j storage for entities

Entities are shared between Reports: (Report)-[:HAS_ENTITY]->(Entity) is
many-to-many, and one (name, type) pair maps to one node.

Dedup Strategy:
- IdentityChecker.find_entity() looks the pair up inside the write transaction
- create() still MERGEs on (name, type), so a concurrent insert of the same
  pair collapses onto one node instead of producing a duplicate
- Exact match only, no normalization or fuzzy matching
"""
import logging
from typing import List, Optional

from curation_graph.models.entity import Entity, DEFAULT_CONFIDENCE
from curation_graph.models.status import PublicationStatus
from curation_graph.models.api import EntityCreate
from curation_graph.repositories.base import GraphRepository
from curation_graph.services.neo4j_service import GraphTransaction

logger = logging.getLogger(__name__)


class EntityRepository(GraphRepository):
    """
    Repository for Entity domain model

    Optional fields are only written when supplied: linking an existing
    entity to another report never blanks what an earlier report set.
    """

    async def create(
        self, report_id: str, entity_id: str, data: EntityCreate, tx: GraphTransaction = None
    ) -> Optional[Entity]:
        """
        Create (or MERGE onto) the (name, type) entity and link it to the report.

        Returns:
            Entity, whose id differs from entity_id if the pair already existed.
            None if the report does not exist.
        """
        row = await self._single("""
            MATCH (r:Report {id: $report_id})
            MERGE (e:Entity {name: $name, type: $type})
            ON CREATE SET
                e.id = $id,
                e.primary_url = $primary_url,
                e.description = $description,
                e.avatar_url = $avatar_url,
                e.confidence = coalesce($confidence, $default_confidence),
                e.status = $status,
                e.created_at = datetime()
            ON MATCH SET
                e.primary_url = coalesce($primary_url, e.primary_url),
                e.description = coalesce($description, e.description),
                e.avatar_url = coalesce($avatar_url, e.avatar_url),
                e.confidence = coalesce($confidence, e.confidence),
                e.updated_at = datetime()
            MERGE (r)-[:HAS_ENTITY]->(e)
            RETURN e {.*} AS entity
        """, {
            'report_id': report_id,
            'id': entity_id,
            'name': data.name,
            'type': data.type.value,
            'primary_url': data.primary_url,
            'description': data.description,
            'avatar_url': data.avatar_url,
            'confidence': data.confidence,
            'default_confidence': DEFAULT_CONFIDENCE,
            'status': PublicationStatus.PENDING.value,
        }, tx)

        if not row:
            return None

        entity = Entity.from_neo4j(row['entity'])
        if entity.id != entity_id:
            logger.info(f"🔗 Entity deduplicated: {entity.name} ({entity.type.value}) → existing {entity.id}")
        else:
            logger.info(f"✨ Created Entity: {entity.name} ({entity.type.value}) {entity.id}")
        return entity

    async def link_to_report(
        self, report_id: str, entity_id: str, data: EntityCreate, tx: GraphTransaction = None
    ) -> Optional[Entity]:
        """Link an existing entity to a report, merging only supplied optional fields."""
        fills = {
            key: value for key, value in {
                'primary_url': data.primary_url,
                'description': data.description,
                'avatar_url': data.avatar_url,
                'confidence': data.confidence,
            }.items() if value is not None
        }

        row = await self._single("""
            MATCH (r:Report {id: $report_id})
            MATCH (e:Entity {id: $entity_id})
            SET e += $fills
            SET e.updated_at = CASE WHEN size(keys($fills)) > 0 THEN datetime() ELSE e.updated_at END
            MERGE (r)-[:HAS_ENTITY]->(e)
            RETURN e {.*} AS entity
        """, {'report_id': report_id, 'entity_id': entity_id, 'fills': fills}, tx)

        if not row:
            return None

        entity = Entity.from_neo4j(row['entity'])
        logger.info(f"🔗 Linked existing Entity {entity.name} ({entity.id}) to report {report_id}")
        return entity

    async def get_by_id(self, entity_id: str, tx: GraphTransaction = None) -> Optional[Entity]:
        row = await self._single("""
            MATCH (e:Entity {id: $id})
            RETURN e {.*} AS entity
        """, {'id': entity_id}, tx)
        return Entity.from_neo4j(row['entity']) if row else None

    async def list_by_report(
        self, report_id: str, status: Optional[PublicationStatus] = None, tx: GraphTransaction = None
    ) -> List[Entity]:
        rows = await self._read("""
            MATCH (:Report {id: $report_id})-[:HAS_ENTITY]->(e:Entity)
            WHERE $status IS NULL OR coalesce(e.status, 'pending') = $status
            RETURN e {.*} AS entity
            ORDER BY e.name
        """, {'report_id': report_id, 'status': status.value if status else None}, tx)
        return [Entity.from_neo4j(row['entity']) for row in rows]

    async def list_by_source(self, source_id: str, tx: GraphTransaction = None) -> List[Entity]:
        """Distinct speakers of the quotes citing a source."""
        rows = await self._read("""
            MATCH (:Source {id: $source_id})<-[:CITES]-(:Quote)-[:QUOTE_OF]->(e:Entity)
            WITH DISTINCT e
            RETURN e {.*} AS entity
            ORDER BY e.name
        """, {'source_id': source_id}, tx)
        return [Entity.from_neo4j(row['entity']) for row in rows]

    async def update(self, entity_id: str, changes: dict, tx: GraphTransaction = None) -> Optional[Entity]:
        row = await self._single("""
            MATCH (e:Entity {id: $id})
            SET e += $changes, e.updated_at = datetime()
            RETURN e {.*} AS entity
        """, {'id': entity_id, 'changes': changes}, tx)
        return Entity.from_neo4j(row['entity']) if row else None

    async def delete(self, entity_id: str, tx: GraphTransaction = None) -> bool:
        """
        Delete entity. DETACH removes HAS_ENTITY and QUOTE_OF edges, so quotes
        that named this entity as speaker survive with no speaker.
        """
        counters = await self._write("""
            MATCH (e:Entity {id: $id})
            DETACH DELETE e
        """, {'id': entity_id}, tx)
        return counters['nodes_deleted'] > 0
