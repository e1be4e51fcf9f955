"""
Entity domain model
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from curation_graph.models.status import PublicationStatus
from curation_graph.utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


class EntityType(str, Enum):
    PERSON = 'person'
    COMPANY = 'company'
    INDUSTRY = 'industry'
    OTHER = 'other'


DEFAULT_CONFIDENCE = 0.9


@dataclass
class Entity:
    """
    Entity domain model - a named subject a Quote can be attributed to.

    Shared between Reports: the same (name, type) pair resolves to one node
    linked from every Report that references it.

    ID format: en_xxxxxxxx
    """
    id: str
    name: str
    type: EntityType

    primary_url: Optional[str] = None
    description: Optional[str] = None
    avatar_url: Optional[str] = None

    confidence: float = DEFAULT_CONFIDENCE

    # Status: 'pending', 'approved', 'published'
    status: PublicationStatus = PublicationStatus.PENDING

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_neo4j(cls, data: dict) -> 'Entity':
        confidence = data.get('confidence')
        return cls(
            id=data['id'],
            name=data['name'],
            type=EntityType(data.get('type') or 'other'),
            primary_url=data.get('primary_url'),
            description=data.get('description'),
            avatar_url=data.get('avatar_url'),
            confidence=DEFAULT_CONFIDENCE if confidence is None else float(confidence),
            status=PublicationStatus(data.get('status') or 'pending'),
            created_at=neo4j_datetime_to_python(data.get('created_at')),
            updated_at=neo4j_datetime_to_python(data.get('updated_at')),
        )

    @property
    def is_published(self) -> bool:
        return self.status == PublicationStatus.PUBLISHED

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type.value,
            'primary_url': self.primary_url,
            'description': self.description,
            'avatar_url': self.avatar_url,
            'confidence': self.confidence,
            'status': self.status.value,
            'created_at': isoformat_or_none(self.created_at),
        }
