"""
Quote Repository - Neo4j storage for quotes

Quotes are owned by a Report (HAS_QUOTE) and optionally point at a speaker
(QUOTE_OF -> Entity) and a citation (CITES -> Source). Both edges are
projected into Quote.entity_id / Quote.source_id on read.

Reachability of entity/source is checked by IdentityChecker before create();
create() only ever links nodes that hang off the same report.
"""
import logging
from typing import List, Optional

from curation_graph.models.quote import Quote
from curation_graph.models.api import QuoteCreate
from curation_graph.repositories.base import GraphRepository
from curation_graph.services.neo4j_service import GraphTransaction

logger = logging.getLogger(__name__)

# Appended to any query that has bound `q`
QUOTE_PROJECTION = """
    OPTIONAL MATCH (q)-[:QUOTE_OF]->(e:Entity)
    OPTIONAL MATCH (q)-[:CITES]->(s:Source)
    OPTIONAL MATCH (r:Report)-[:HAS_QUOTE]->(q)
    RETURN q {.*} AS quote, e.id AS entity_id, s.id AS source_id, r.id AS report_id
"""


def _to_quote(row: dict) -> Quote:
    return Quote.from_neo4j(
        row['quote'],
        entity_id=row.get('entity_id'),
        source_id=row.get('source_id'),
        report_id=row.get('report_id'),
    )


class QuoteRepository(GraphRepository):
    """Repository for Quote domain model"""

    async def create(
        self, report_id: str, quote_id: str, data: QuoteCreate, tx: GraphTransaction = None
    ) -> Optional[Quote]:
        row = await self._single("""
            MATCH (r:Report {id: $report_id})
            CREATE (q:Quote {
                id: $id,
                short_text: $short_text,
                text: $text,
                author: $author,
                source_label: $source_label,
                source_url: $source_url,
                date: $date,
                is_public: $is_public,
                is_approved: $is_approved,
                created_at: datetime()
            })
            CREATE (r)-[:HAS_QUOTE]->(q)
            WITH r, q
            OPTIONAL MATCH (r)-[:HAS_ENTITY]->(e:Entity {id: $entity_id})
            FOREACH (_ IN CASE WHEN e IS NULL THEN [] ELSE [1] END | CREATE (q)-[:QUOTE_OF]->(e))
            WITH r, q, e
            OPTIONAL MATCH (r)-[:HAS_SOURCE]->(s:Source {id: $source_id})
            FOREACH (_ IN CASE WHEN s IS NULL THEN [] ELSE [1] END | CREATE (q)-[:CITES]->(s))
            RETURN q {.*} AS quote, e.id AS entity_id, s.id AS source_id, r.id AS report_id
        """, {
            'report_id': report_id,
            'id': quote_id,
            'short_text': data.short_text,
            'text': data.text,
            'author': data.author,
            'source_label': data.source_label,
            'source_url': data.source_url,
            'date': data.date,
            'is_public': data.is_public,
            'is_approved': data.is_approved,
            'entity_id': data.entity_id,
            'source_id': data.source_id,
        }, tx)

        if not row:
            return None

        quote = _to_quote(row)
        logger.info(f"💬 Created Quote {quote.id} in report {report_id} [{quote.status.value}]")
        return quote

    async def get_by_id(self, quote_id: str, tx: GraphTransaction = None) -> Optional[Quote]:
        row = await self._single(
            "MATCH (q:Quote {id: $id})" + QUOTE_PROJECTION + "LIMIT 1",
            {'id': quote_id}, tx
        )
        return _to_quote(row) if row else None

    async def list_by_report(self, report_id: str, tx: GraphTransaction = None) -> List[Quote]:
        rows = await self._read("""
            MATCH (:Report {id: $report_id})-[:HAS_QUOTE]->(q:Quote)
            WITH q
        """ + QUOTE_PROJECTION + "ORDER BY q.created_at DESC", {'report_id': report_id}, tx)
        return [_to_quote(row) for row in rows]

    async def list_by_source(self, source_id: str, tx: GraphTransaction = None) -> List[Quote]:
        rows = await self._read("""
            MATCH (:Source {id: $source_id})<-[:CITES]-(q:Quote)
            WITH DISTINCT q
        """ + QUOTE_PROJECTION + "ORDER BY q.created_at DESC", {'source_id': source_id}, tx)
        return [_to_quote(row) for row in rows]

    async def update(self, quote_id: str, changes: dict, tx: GraphTransaction = None) -> Optional[Quote]:
        row = await self._single("""
            MATCH (q:Quote {id: $id})
            SET q += $changes, q.updated_at = datetime()
            WITH q
        """ + QUOTE_PROJECTION + "LIMIT 1", {'id': quote_id, 'changes': changes}, tx)
        return _to_quote(row) if row else None

    async def set_source(self, quote_id: str, source_id: str, tx: GraphTransaction = None) -> Optional[Quote]:
        """Replace the quote's citation edge."""
        await self._write("""
            MATCH (q:Quote {id: $quote_id})-[old:CITES]->(:Source)
            DELETE old
        """, {'quote_id': quote_id}, tx)

        row = await self._single("""
            MATCH (q:Quote {id: $quote_id})
            MATCH (src:Source {id: $source_id})
            CREATE (q)-[:CITES]->(src)
            SET q.updated_at = datetime()
            WITH q
        """ + QUOTE_PROJECTION + "LIMIT 1", {'quote_id': quote_id, 'source_id': source_id}, tx)
        return _to_quote(row) if row else None

    async def delete(self, quote_id: str, tx: GraphTransaction = None) -> bool:
        counters = await self._write("""
            MATCH (q:Quote {id: $id})
            DETACH DELETE q
        """, {'id': quote_id}, tx)
        return counters['nodes_deleted'] > 0
