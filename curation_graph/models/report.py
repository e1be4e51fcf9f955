"""
Report domain model
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from curation_graph.utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


@dataclass
class Report:
    """
    Report - a per-client workspace holding Sources, Entities and Quotes.

    ID format: rp_xxxxxxxx
    """
    id: str
    title: str
    content: Optional[str] = None

    # Owning client (BELONGS_TO edge), filled when the query projects it
    client_id: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_neo4j(cls, data: dict, client_id: Optional[str] = None) -> 'Report':
        return cls(
            id=data['id'],
            title=data['title'],
            content=data.get('content'),
            client_id=client_id or data.get('client_id'),
            created_at=neo4j_datetime_to_python(data.get('created_at')),
            updated_at=neo4j_datetime_to_python(data.get('updated_at')),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'client_id': self.client_id,
            'created_at': isoformat_or_none(self.created_at),
        }
