"""
Tests for the quote status resolver and status filter parsing.
"""

import pytest

from curation_graph.errors import ValidationError
from curation_graph.models import Entity, Quote, Source
from curation_graph.models.status import (
    PublicationStatus,
    QuoteStatus,
    resolve_quote_status,
    parse_status_filter,
)


@pytest.mark.parametrize("is_public,is_approved,expected", [
    (False, False, QuoteStatus.PENDING),
    (False, True, QuoteStatus.APPROVED),
    (True, True, QuoteStatus.PUBLISHED),
    (True, False, QuoteStatus.PUBLISHED),
])
def test_resolve_quote_status(is_public, is_approved, expected):
    assert resolve_quote_status(is_public, is_approved) == expected


def test_missing_flags_count_as_false():
    assert resolve_quote_status(None, None) == QuoteStatus.PENDING
    assert resolve_quote_status(None, True) == QuoteStatus.APPROVED


def test_quote_status_maps_to_stage():
    assert QuoteStatus.PENDING.stage == PublicationStatus.PENDING
    assert QuoteStatus.APPROVED.stage == PublicationStatus.APPROVED
    assert QuoteStatus.PUBLISHED.stage == PublicationStatus.PUBLISHED


def test_quote_model_derives_status():
    quote = Quote.from_neo4j({
        'id': 'qt_aaaaaaaa',
        'short_text': 'Hello world',
        'text': 'Hello world, said Jane.',
        'is_public': True,
        'is_approved': False,
    })
    assert quote.status == QuoteStatus.PUBLISHED
    assert quote.to_dict()['status'] == 'Published'


@pytest.mark.parametrize("value,expected", [
    (None, None),
    ('', None),
    ('pending', PublicationStatus.PENDING),
    ('Approved', PublicationStatus.APPROVED),
    (' PUBLISHED ', PublicationStatus.PUBLISHED),
    (PublicationStatus.APPROVED, PublicationStatus.APPROVED),
    (QuoteStatus.PUBLISHED, PublicationStatus.PUBLISHED),
])
def test_parse_status_filter(value, expected):
    assert parse_status_filter(value) == expected


def test_parse_status_filter_rejects_unknown():
    with pytest.raises(ValidationError) as exc:
        parse_status_filter('archived')
    assert exc.value.field == 'status'


def test_nodes_without_status_read_as_pending():
    source = Source.from_neo4j({'id': 'sr_aaaaaaaa', 'url': 'https://example.com/a'})
    entity = Entity.from_neo4j({'id': 'en_aaaaaaaa', 'name': 'Jane Doe', 'type': 'person'})

    assert source.status == PublicationStatus.PENDING
    assert source.title == 'https://example.com/a'
    assert entity.status == PublicationStatus.PENDING
    assert not source.is_published
    assert not entity.is_published


def test_published_entity():
    entity = Entity.from_neo4j({
        'id': 'en_aaaaaaaa', 'name': 'Jane Doe', 'type': 'person', 'status': 'published',
    })
    assert entity.is_published
