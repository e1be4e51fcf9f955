"""
Tests for input models and pydantic -> ValidationError translation.
"""

import pytest

from curation_graph.errors import ValidationError
from curation_graph.models.entity import EntityType
from curation_graph.models.source import SourceType
from curation_graph.models.status import PublicationStatus
from curation_graph.models.api import (
    ClientCreate,
    ClientUpdate,
    EntityCreate,
    EntityUpdate,
    SourceCreate,
    QuoteCreate,
    QuoteUpdate,
    ReportCreate,
    parse_input,
)


# =============================================================================
# Clients / Reports
# =============================================================================

def test_client_defaults():
    client = parse_input(ClientCreate, {'name': 'Acme'})
    assert client.language == 'en'
    assert client.niches == []
    assert client.mandatory_sources == []


def test_client_name_too_short():
    with pytest.raises(ValidationError) as exc:
        parse_input(ClientCreate, {'name': 'Ac'})
    assert exc.value.field == 'name'


def test_client_language_restricted():
    with pytest.raises(ValidationError) as exc:
        parse_input(ClientCreate, {'name': 'Acme', 'language': 'fr'})
    assert exc.value.field == 'language'


def test_unknown_field_rejected():
    with pytest.raises(ValidationError) as exc:
        parse_input(ClientCreate, {'name': 'Acme', 'owner': 'x'})
    assert exc.value.field == 'owner'


def test_empty_update_rejected():
    with pytest.raises(ValidationError) as exc:
        parse_input(ClientUpdate, {})
    assert 'At least one field' in exc.value.message


def test_update_changes_only_carry_set_fields():
    update = parse_input(ClientUpdate, {'context': 'Fintech research'})
    assert update.changes() == {'context': 'Fintech research'}


def test_report_title_required():
    assert parse_input(ReportCreate, {'title': 'Q1'}).title == 'Q1'
    with pytest.raises(ValidationError) as exc:
        parse_input(ReportCreate, {'title': '   '})
    assert exc.value.field == 'title'


def test_model_instance_passes_through():
    report = ReportCreate(title='Quarterly review')
    assert parse_input(ReportCreate, report) is report


# =============================================================================
# Entities / Sources
# =============================================================================

def test_entity_type_must_be_known():
    with pytest.raises(ValidationError) as exc:
        parse_input(EntityCreate, {'name': 'Jane Doe', 'type': 'planet'})
    assert exc.value.field == 'type'


def test_entity_confidence_bounds():
    with pytest.raises(ValidationError) as exc:
        parse_input(EntityCreate, {'name': 'Jane Doe', 'type': 'person', 'confidence': 1.5})
    assert exc.value.field == 'confidence'


def test_entity_confidence_left_unset():
    entity = parse_input(EntityCreate, {'name': 'Jane Doe', 'type': 'person'})
    assert entity.type == EntityType.PERSON
    assert entity.confidence is None


def test_entity_blank_url_becomes_none():
    entity = parse_input(EntityCreate, {'name': 'Jane Doe', 'type': 'person', 'primary_url': '  '})
    assert entity.primary_url is None


def test_entity_url_must_be_http():
    with pytest.raises(ValidationError) as exc:
        parse_input(EntityCreate, {'name': 'Jane Doe', 'type': 'person', 'avatar_url': 'ftp://x/y.png'})
    assert exc.value.field == 'avatar_url'


def test_entity_update_status():
    update = parse_input(EntityUpdate, {'status': 'published'})
    assert update.changes() == {'status': 'published'}


def test_source_url_required():
    with pytest.raises(ValidationError) as exc:
        parse_input(SourceCreate, {'url': ''})
    assert exc.value.field == 'url'


def test_source_overrides_exclude_url_and_status():
    source = parse_input(SourceCreate, {
        'url': 'https://example.com/a',
        'title': 'Custom title',
        'type': 'video',
    })
    assert source.status == PublicationStatus.PENDING
    assert source.type == SourceType.VIDEO
    assert source.overrides() == {'title': 'Custom title', 'type': 'video'}


# =============================================================================
# Quotes - published implies approved
# =============================================================================

QUOTE = {'short_text': 'Hello world', 'text': 'Hello world, said Jane.'}


def test_quote_text_lengths():
    with pytest.raises(ValidationError) as exc:
        parse_input(QuoteCreate, {'short_text': 'Hi', 'text': 'Hello world, said Jane.'})
    assert exc.value.field == 'short_text'

    with pytest.raises(ValidationError) as exc:
        parse_input(QuoteCreate, {'short_text': 'Hello world', 'text': 'short'})
    assert exc.value.field == 'text'


def test_quote_defaults_pending():
    quote = parse_input(QuoteCreate, QUOTE)
    assert quote.is_public is False
    assert quote.is_approved is False
    assert quote.entity_id is None


def test_quote_blank_references_become_none():
    quote = parse_input(QuoteCreate, {**QUOTE, 'entity_id': '', 'source_id': ''})
    assert quote.entity_id is None
    assert quote.source_id is None


def test_quote_create_public_forces_approved():
    quote = parse_input(QuoteCreate, {**QUOTE, 'is_public': True})
    assert quote.is_approved is True


def test_quote_create_public_and_unapproved_rejected():
    with pytest.raises(ValidationError) as exc:
        parse_input(QuoteCreate, {**QUOTE, 'is_public': True, 'is_approved': False})
    assert 'is_approved' in exc.value.message


def test_quote_update_publish_sets_approved():
    update = parse_input(QuoteUpdate, {'is_public': True})
    assert update.changes() == {'is_public': True, 'is_approved': True}


def test_quote_update_withdraw_approval_unpublishes():
    update = parse_input(QuoteUpdate, {'is_approved': False})
    assert update.changes() == {'is_approved': False, 'is_public': False}


def test_quote_update_unpublish_keeps_approval():
    update = parse_input(QuoteUpdate, {'is_public': False})
    assert update.changes() == {'is_public': False}


def test_quote_update_conflict_rejected():
    with pytest.raises(ValidationError):
        parse_input(QuoteUpdate, {'is_public': True, 'is_approved': False})


def test_quote_date_max_length():
    with pytest.raises(ValidationError) as exc:
        parse_input(QuoteCreate, {**QUOTE, 'date': 'x' * 21})
    assert exc.value.field == 'date'
