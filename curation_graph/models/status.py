"""
Publication status

Entities and Sources persist one of the literal strings pending|approved|published.
Quotes never persist a status: it is derived from (is_public, is_approved) on
every read, through resolve_quote_status() only.

Precedence:
    is_public                  -> Published
    not is_public, is_approved -> Approved
    otherwise                  -> Pending
"""
from enum import Enum
from typing import Optional, Union

from curation_graph.errors import ValidationError


class PublicationStatus(str, Enum):
    """Stored lifecycle stage of an Entity or Source."""
    PENDING = 'pending'
    APPROVED = 'approved'
    PUBLISHED = 'published'


class QuoteStatus(str, Enum):
    """Derived lifecycle stage of a Quote."""
    PENDING = 'Pending'
    APPROVED = 'Approved'
    PUBLISHED = 'Published'

    @property
    def stage(self) -> PublicationStatus:
        return PublicationStatus(self.value.lower())


def resolve_quote_status(is_public: Optional[bool], is_approved: Optional[bool]) -> QuoteStatus:
    """Map a quote's two flags to its visible status. None counts as False."""
    if is_public:
        return QuoteStatus.PUBLISHED
    if is_approved:
        return QuoteStatus.APPROVED
    return QuoteStatus.PENDING


def parse_status_filter(
    value: Union[str, PublicationStatus, QuoteStatus, None]
) -> Optional[PublicationStatus]:
    """
    Normalize an optional status filter.

    Accepts 'pending' / 'Approved' / PublicationStatus / QuoteStatus, or None
    for "no filter".

    Raises:
        ValidationError: unknown status value
    """
    if value is None or value == '':
        return None
    if isinstance(value, QuoteStatus):
        return value.stage
    if isinstance(value, PublicationStatus):
        return value
    try:
        return PublicationStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            'status', f"must be one of {[s.value for s in PublicationStatus]}, got {value!r}"
        )
