"""
Neo4j connection wiring shared by services and the operator scripts.
"""
from dataclasses import dataclass

from curation_graph.config.settings import Settings, get_settings


@dataclass
class Neo4jConfig:
    """Where and as whom to connect."""
    uri: str
    user: str
    password: str
    database: str = "neo4j"

    @classmethod
    def from_settings(cls, settings: Settings = None) -> 'Neo4jConfig':
        settings = settings or get_settings()
        return cls(
            uri=settings.neo4j_uri,
            user=settings.neo4j_user,
            password=settings.neo4j_password,
            database=settings.neo4j_database,
        )


async def create_neo4j_service(config: Neo4jConfig = None):
    """Build a Neo4jService from config (settings by default) and connect it."""
    from curation_graph.services.neo4j_service import Neo4jService

    config = config or Neo4jConfig.from_settings()
    service = Neo4jService(
        uri=config.uri,
        user=config.user,
        password=config.password,
        database=config.database,
    )
    await service.connect()
    return service
