"""
Neo4j Graph Service - transactional access to the curation graph

Neo4j is the SINGLE SOURCE OF TRUTH for the curation graph.

Node Types:
- Client: {id, name, context, niches, interests, mandatory_sources, language}
- Report: {id, title, content}
- Entity: {id, name, type, primary_url, description, avatar_url, confidence, status}
- Source: {id, url, title, author, published_at, type, description, thumbnail, status}
- Quote: {id, short_text, text, author, source_label, source_url, date, is_public, is_approved}

Relationships:
- (Report)-[:BELONGS_TO]->(Client)
- (Report)-[:HAS_ENTITY]->(Entity)   - many-to-many
- (Report)-[:HAS_SOURCE]->(Source)
- (Report)-[:HAS_QUOTE]->(Quote)
- (Quote)-[:QUOTE_OF]->(Entity)      - speaker, 0..1
- (Quote)-[:CITES]->(Source)         - citation, 0..1

Every multi-statement mutation runs inside transaction(): one explicit
Neo4j transaction, committed on success, rolled back on any exception.
Driver failures surface as StoreError. No retries happen here.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from neo4j import AsyncGraphDatabase, AsyncDriver
from neo4j.exceptions import DriverError, Neo4jError

from curation_graph.errors import StoreError

logger = logging.getLogger(__name__)


class GraphTransaction:
    """Thin wrapper over an open AsyncTransaction returning plain dicts."""

    def __init__(self, tx):
        self._tx = tx

    async def read(self, query: str, parameters: Dict = None) -> List[Dict[str, Any]]:
        """Run a query, return all rows."""
        result = await self._tx.run(query, parameters or {})
        return await result.data()

    async def single(self, query: str, parameters: Dict = None) -> Optional[Dict[str, Any]]:
        """Run a query, return the first row or None."""
        result = await self._tx.run(query, parameters or {})
        record = await result.single()
        return record.data() if record else None

    async def write(self, query: str, parameters: Dict = None) -> Dict[str, int]:
        """Run a query for its side effects, return update counters."""
        result = await self._tx.run(query, parameters or {})
        summary = await result.consume()
        counters = summary.counters
        return {
            'nodes_created': counters.nodes_created,
            'nodes_deleted': counters.nodes_deleted,
            'relationships_created': counters.relationships_created,
            'relationships_deleted': counters.relationships_deleted,
            'properties_set': counters.properties_set,
        }


class Neo4jService:
    """Service for Neo4j graph operations"""

    def __init__(
        self,
        uri: str = None,
        user: str = None,
        password: str = None,
        database: str = None,
    ):
        """Initialize Neo4j connection settings (connect() opens the driver)"""
        if uri is None or user is None or password is None or database is None:
            from curation_graph.config.settings import get_settings
            settings = get_settings()
            uri = uri or settings.neo4j_uri
            user = user or settings.neo4j_user
            password = password or settings.neo4j_password
            database = database or settings.neo4j_database

        self.uri = uri
        self.user = user
        self.password = password
        self.database = database

        self.driver: Optional[AsyncDriver] = None

    async def connect(self):
        """Establish connection to Neo4j"""
        if not self.driver:
            self.driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password)
            )
            try:
                await self.driver.verify_connectivity()
            except (DriverError, Neo4jError) as e:
                await self.driver.close()
                self.driver = None
                raise StoreError(f"Cannot connect to Neo4j at {self.uri}: {e}") from e
            logger.info(f"Connected to Neo4j at {self.uri}")

    async def close(self):
        """Close Neo4j connection"""
        if self.driver:
            await self.driver.close()
            self.driver = None
            logger.info("Closed Neo4j connection")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _require_driver(self) -> AsyncDriver:
        if not self.driver:
            raise StoreError("Neo4jService is not connected; call connect() first")
        return self.driver

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[GraphTransaction]:
        """
        Open one explicit transaction.

        Commits when the block exits normally. Any exception rolls back;
        driver exceptions are re-raised as StoreError, domain exceptions
        (NotFoundError, ReferentialError, ...) propagate unchanged.
        """
        driver = self._require_driver()
        try:
            async with driver.session(database=self.database) as session:
                tx = await session.begin_transaction()
                try:
                    yield GraphTransaction(tx)
                    await tx.commit()
                finally:
                    # no-op after commit; rolls back otherwise
                    await tx.close()
        except (DriverError, Neo4jError) as e:
            logger.error(f"Graph transaction failed: {e}")
            raise StoreError(str(e)) from e

    async def _execute_write(self, query: str, parameters: Dict = None):
        """Execute write query in its own transaction, return the first row"""
        async with self.transaction() as tx:
            return await tx.single(query, parameters)

    async def initialize_constraints(self) -> Dict[str, bool]:
        """Create Neo4j constraints and indexes for the curation graph."""
        constraints = [
            # Unique IDs for all node types
            "CREATE CONSTRAINT client_id IF NOT EXISTS FOR (c:Client) REQUIRE c.id IS UNIQUE",
            "CREATE CONSTRAINT report_id IF NOT EXISTS FOR (r:Report) REQUIRE r.id IS UNIQUE",
            "CREATE CONSTRAINT entity_id IF NOT EXISTS FOR (e:Entity) REQUIRE e.id IS UNIQUE",
            "CREATE CONSTRAINT source_id IF NOT EXISTS FOR (s:Source) REQUIRE s.id IS UNIQUE",
            "CREATE CONSTRAINT quote_id IF NOT EXISTS FOR (q:Quote) REQUIRE q.id IS UNIQUE",
            # Entity (name, type) uniqueness closes the create race; needs a server
            # that supports composite uniqueness constraints
            "CREATE CONSTRAINT entity_name_type IF NOT EXISTS FOR (e:Entity) REQUIRE (e.name, e.type) IS UNIQUE",
            # Indexes for common queries
            "CREATE INDEX entity_status IF NOT EXISTS FOR (e:Entity) ON (e.status)",
            "CREATE INDEX source_status IF NOT EXISTS FOR (s:Source) ON (s.status)",
            "CREATE INDEX quote_public IF NOT EXISTS FOR (q:Quote) ON (q.is_public)",
        ]

        created = {}
        for constraint_query in constraints:
            name = constraint_query.split()[2]
            try:
                await self._execute_write(constraint_query)
                created[name] = True
                logger.info(f"{constraint_query.split()[1].lower()} {name} ready")
            except StoreError as e:
                created[name] = False
                logger.warning(f"Constraint/index {name} not created: {e}")
        return created
