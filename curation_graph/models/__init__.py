"""
Domain Models - Storage-agnostic data structures

These models represent the curation graph nodes independent of storage.
Repositories turn Neo4j rows into these; services only see these.
"""

from .client import Client
from .report import Report
from .entity import Entity, EntityType
from .source import Source, SourceType
from .quote import Quote
from .status import (
    PublicationStatus,
    QuoteStatus,
    resolve_quote_status,
    parse_status_filter,
)

__all__ = [
    'Client',
    'Report',
    'Entity',
    'EntityType',
    'Source',
    'SourceType',
    'Quote',

    # Status
    'PublicationStatus',
    'QuoteStatus',
    'resolve_quote_status',
    'parse_status_filter',
]
