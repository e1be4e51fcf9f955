"""
Pydantic input models for curation operations

Every mutating operation parses its input through one of these before a
graph transaction is opened, so malformed input never reaches the store.
Update models carry only the fields the caller set.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from curation_graph.models.entity import EntityType
from curation_graph.models.source import SourceType
from curation_graph.models.status import PublicationStatus
from curation_graph.utils.url_utils import is_http_url


def _optional_url(value: Optional[str]) -> Optional[str]:
    """Blank -> None; anything else must be an absolute http(s) URL."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not is_http_url(value):
        raise ValueError('must be an absolute http(s) URL')
    return value


class _Input(BaseModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class _Update(_Input):
    """Partial update: at least one field must be set."""

    @model_validator(mode='after')
    def not_empty(self):
        if not self.changes():
            raise ValueError('At least one field must be provided for update')
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True, mode='json')


# ============================================================================
# Client / Report
# ============================================================================

class ClientCreate(_Input):
    """Request model for creating a client"""
    name: str = Field(min_length=3)
    context: str = ''
    niches: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    mandatory_sources: List[str] = Field(default_factory=list)
    language: Literal['en', 'es'] = 'en'


class ClientUpdate(_Update):
    name: Optional[str] = Field(default=None, min_length=3)
    context: Optional[str] = None
    niches: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    mandatory_sources: Optional[List[str]] = None
    language: Optional[Literal['en', 'es']] = None


class ReportCreate(_Input):
    title: str = Field(min_length=1)
    content: Optional[str] = None


class ReportUpdate(_Update):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None


# ============================================================================
# Entity
# ============================================================================

class EntityCreate(_Input):
    """
    Entity to resolve-or-create under a report.

    confidence stays None when not given so an existing node keeps its value;
    new nodes get the default (0.9).
    """
    name: str = Field(min_length=2, max_length=100)
    type: EntityType
    primary_url: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=160)
    avatar_url: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @field_validator('primary_url', 'avatar_url')
    @classmethod
    def check_urls(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


class EntityUpdate(_Update):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    type: Optional[EntityType] = None
    primary_url: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=160)
    avatar_url: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    status: Optional[PublicationStatus] = None

    @field_validator('primary_url', 'avatar_url')
    @classmethod
    def check_urls(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


# ============================================================================
# Source
# ============================================================================

class SourceCreate(_Input):
    """
    Source to add to a report.

    Only url is required; every other field overrides what the metadata
    fetcher found.
    """
    url: str
    title: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[str] = None
    type: Optional[SourceType] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    status: PublicationStatus = PublicationStatus.PENDING

    @field_validator('url')
    @classmethod
    def check_url(cls, value: str) -> str:
        url = _optional_url(value)
        if url is None:
            raise ValueError('url is required')
        return url

    @field_validator('thumbnail')
    @classmethod
    def check_thumbnail(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)

    def overrides(self) -> dict:
        return self.model_dump(exclude={'url', 'status'}, exclude_none=True, mode='json')


class SourceUpdate(_Update):
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[str] = None
    type: Optional[SourceType] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    status: Optional[PublicationStatus] = None

    @field_validator('url', 'thumbnail')
    @classmethod
    def check_urls(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


# ============================================================================
# Quote
# ============================================================================

def _apply_publication_policy(model, explicit: set) -> None:
    """
    Published implies approved.

    - is_public=True forces is_approved=True
    - is_approved=False (without is_public) also withdraws publication
    - is_public=True together with an explicit is_approved=False is rejected
    """
    if model.is_public:
        if 'is_approved' in explicit and model.is_approved is False:
            raise ValueError('is_approved cannot be false while is_public is true')
        model.is_approved = True
    elif model.is_approved is False and 'is_public' not in explicit:
        model.is_public = False


class QuoteCreate(_Input):
    short_text: str = Field(min_length=5)
    text: str = Field(min_length=10)
    entity_id: Optional[str] = None
    source_id: Optional[str] = None
    author: Optional[str] = None
    source_label: Optional[str] = None
    source_url: Optional[str] = None
    date: Optional[str] = Field(default=None, max_length=20)
    is_public: bool = False
    is_approved: bool = False

    @field_validator('source_url')
    @classmethod
    def check_source_url(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)

    @field_validator('entity_id', 'source_id', 'date', 'author', 'source_label')
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode='after')
    def publication_policy(self):
        _apply_publication_policy(self, set(self.model_fields_set))
        return self


class QuoteUpdate(_Update):
    short_text: Optional[str] = Field(default=None, min_length=5)
    text: Optional[str] = Field(default=None, min_length=10)
    author: Optional[str] = None
    source_label: Optional[str] = None
    source_url: Optional[str] = None
    date: Optional[str] = Field(default=None, max_length=20)
    is_public: Optional[bool] = None
    is_approved: Optional[bool] = None

    @field_validator('source_url')
    @classmethod
    def check_source_url(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)

    @model_validator(mode='after')
    def publication_policy(self):
        explicit = {name for name in self.model_fields_set if getattr(self, name) is not None}
        _apply_publication_policy(self, explicit)
        return self
