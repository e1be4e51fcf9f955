"""
Repository Pattern - Storage abstraction layer

Repositories hide the Cypher from business logic. Consumers work with
domain models, not driver records.

Every method accepts an optional open GraphTransaction; CurationService
passes one so identity checks and writes commit (or roll back) together.

- ClientRepository: Client nodes
- ReportRepository: Report nodes, BELONGS_TO, and the report cascade
- EntityRepository: Entity nodes, HAS_ENTITY, (name, type) dedup
- SourceRepository: Source nodes, HAS_SOURCE
- QuoteRepository: Quote nodes, HAS_QUOTE, QUOTE_OF, CITES
"""
from .client_repository import ClientRepository
from .report_repository import ReportRepository
from .entity_repository import EntityRepository
from .source_repository import SourceRepository
from .quote_repository import QuoteRepository

__all__ = [
    'ClientRepository',
    'ReportRepository',
    'EntityRepository',
    'SourceRepository',
    'QuoteRepository',
]
