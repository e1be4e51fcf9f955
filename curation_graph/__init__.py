"""
Curation graph - clients, reports and the entity/source/quote evidence graph
behind them, with a three-stage publication workflow.
"""
from curation_graph.errors import (
    CurationError,
    ValidationError,
    NotFoundError,
    ReferentialError,
    StoreError,
)
from curation_graph.services.neo4j_service import Neo4jService
from curation_graph.services.curation_service import CurationService
from curation_graph.services.publication_service import PublicationService

__version__ = '0.1.0'

__all__ = [
    'CurationError',
    'ValidationError',
    'NotFoundError',
    'ReferentialError',
    'StoreError',
    'Neo4jService',
    'CurationService',
    'PublicationService',
]
