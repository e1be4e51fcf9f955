"""
Client domain model
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from curation_graph.utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


@dataclass
class Client:
    """
    Client - root of ownership; owns Reports.

    ID format: cl_xxxxxxxx
    """
    id: str
    name: str
    context: str = ''
    niches: List[str] = field(default_factory=list)
    interests: List[str] = field(default_factory=list)
    mandatory_sources: List[str] = field(default_factory=list)
    language: str = 'en'

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_neo4j(cls, data: dict) -> 'Client':
        return cls(
            id=data['id'],
            name=data['name'],
            context=data.get('context') or '',
            niches=list(data.get('niches') or []),
            interests=list(data.get('interests') or []),
            mandatory_sources=list(data.get('mandatory_sources') or []),
            language=data.get('language') or 'en',
            created_at=neo4j_datetime_to_python(data.get('created_at')),
            updated_at=neo4j_datetime_to_python(data.get('updated_at')),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'context': self.context,
            'niches': self.niches,
            'interests': self.interests,
            'mandatory_sources': self.mandatory_sources,
            'language': self.language,
            'created_at': isoformat_or_none(self.created_at),
        }
