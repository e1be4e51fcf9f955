"""
Shared plumbing for Neo4j-backed repositories.

Every repository method takes an optional open GraphTransaction. Services pass
their transaction so checks and writes share one unit of work; standalone
reads open their own.
"""
from typing import Any, Dict, List, Optional

from curation_graph.services.neo4j_service import GraphTransaction, Neo4jService


class GraphRepository:

    def __init__(self, neo4j_service: Neo4jService):
        self.neo4j = neo4j_service

    async def _read(
        self, query: str, parameters: Dict = None, tx: Optional[GraphTransaction] = None
    ) -> List[Dict[str, Any]]:
        if tx is not None:
            return await tx.read(query, parameters)
        async with self.neo4j.transaction() as own:
            return await own.read(query, parameters)

    async def _single(
        self, query: str, parameters: Dict = None, tx: Optional[GraphTransaction] = None
    ) -> Optional[Dict[str, Any]]:
        if tx is not None:
            return await tx.single(query, parameters)
        async with self.neo4j.transaction() as own:
            return await own.single(query, parameters)

    async def _write(
        self, query: str, parameters: Dict = None, tx: Optional[GraphTransaction] = None
    ) -> Dict[str, int]:
        if tx is not None:
            return await tx.write(query, parameters)
        async with self.neo4j.transaction() as own:
            return await own.write(query, parameters)
