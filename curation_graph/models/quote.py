"""
Quote domain model
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from curation_graph.models.status import QuoteStatus, resolve_quote_status
from curation_graph.utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


@dataclass
class Quote:
    """
    Quote cited within a Report.

    Speaker (QUOTE_OF -> Entity) and citation (CITES -> Source) are
    relationships, projected here as entity_id / source_id. Either may be
    None, including after the referenced node was deleted.

    Status is derived, never stored.

    ID format: qt_xxxxxxxx
    """
    id: str
    short_text: str
    text: str

    author: Optional[str] = None
    source_label: Optional[str] = None
    source_url: Optional[str] = None
    date: Optional[str] = None

    is_public: bool = False
    is_approved: bool = False

    entity_id: Optional[str] = None
    source_id: Optional[str] = None
    report_id: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_neo4j(
        cls,
        data: dict,
        entity_id: Optional[str] = None,
        source_id: Optional[str] = None,
        report_id: Optional[str] = None,
    ) -> 'Quote':
        return cls(
            id=data['id'],
            short_text=data['short_text'],
            text=data.get('text') or data['short_text'],
            author=data.get('author'),
            source_label=data.get('source_label'),
            source_url=data.get('source_url'),
            date=data.get('date'),
            is_public=bool(data.get('is_public')),
            is_approved=bool(data.get('is_approved')),
            entity_id=entity_id,
            source_id=source_id,
            report_id=report_id,
            created_at=neo4j_datetime_to_python(data.get('created_at')),
            updated_at=neo4j_datetime_to_python(data.get('updated_at')),
        )

    @property
    def status(self) -> QuoteStatus:
        return resolve_quote_status(self.is_public, self.is_approved)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'short_text': self.short_text,
            'text': self.text,
            'author': self.author,
            'source_label': self.source_label,
            'source_url': self.source_url,
            'date': self.date,
            'is_public': self.is_public,
            'is_approved': self.is_approved,
            'status': self.status.value,
            'entity_id': self.entity_id,
            'source_id': self.source_id,
            'report_id': self.report_id,
            'created_at': isoformat_or_none(self.created_at),
        }
