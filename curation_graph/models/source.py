"""
Source domain model - a cited, URL-based origin for Quotes.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from curation_graph.models.status import PublicationStatus
from curation_graph.utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


class SourceType(str, Enum):
    ARTICLE = 'article'
    VIDEO = 'video'
    SOCIAL = 'social'
    OTHER = 'other'


@dataclass
class Source:
    """
    Source owned by exactly one Report.

    ID format: sr_xxxxxxxx
    """
    id: str
    url: str
    title: str
    type: SourceType = SourceType.ARTICLE

    author: Optional[str] = None
    published_at: Optional[str] = None  # as reported by the page, not normalized
    description: Optional[str] = None
    thumbnail: Optional[str] = None

    status: PublicationStatus = PublicationStatus.PENDING

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_neo4j(cls, data: dict) -> 'Source':
        return cls(
            id=data['id'],
            url=data['url'],
            title=data.get('title') or data['url'],
            type=SourceType(data.get('type') or 'article'),
            author=data.get('author'),
            published_at=data.get('published_at'),
            description=data.get('description'),
            thumbnail=data.get('thumbnail'),
            # Sources created before status existed read as pending
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
            'url': self.url,
            'title': self.title,
            'type': self.type.value,
            'author': self.author,
            'published_at': self.published_at,
            'description': self.description,
            'thumbnail': self.thumbnail,
            'status': self.status.value,
            'created_at': isoformat_or_none(self.created_at),
        }
