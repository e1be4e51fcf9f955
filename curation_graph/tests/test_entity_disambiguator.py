"""
Tests for the entity disambiguator against a scripted chat completions client.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from curation_graph.models.entity import EntityType
from curation_graph.services.entity_disambiguator import (
    EntityDisambiguator,
    EntitySuggestion,
    MAX_SUGGESTIONS,
    parse_suggestions,
)


def make_client(content: str = None, error: Exception = None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


# =============================================================================
# parse_suggestions
# =============================================================================

def test_parse_object_form():
    raw = json.dumps({"suggestions": [
        {"name": " Jane Doe ", "type": "person", "confidence": 0.93, "primary_url": "https://janedoe.com"},
    ]})
    assert parse_suggestions(raw) == [
        EntitySuggestion(name='Jane Doe', type=EntityType.PERSON, confidence=0.93, primary_url='https://janedoe.com'),
    ]


def test_parse_bare_array_and_camel_case_url():
    raw = json.dumps([{"name": "Acme", "type": "company", "confidence": 1, "primaryUrl": "https://acme.com"}])
    suggestions = parse_suggestions(raw)
    assert suggestions[0].primary_url == 'https://acme.com'
    assert suggestions[0].confidence == 1.0


def test_parse_clamps_confidence_and_coerces_type():
    raw = json.dumps({"suggestions": [
        {"name": "A", "type": "planet", "confidence": 1.7},
        {"name": "B", "type": "COMPANY", "confidence": -0.2},
    ]})
    first, second = parse_suggestions(raw)
    assert first.type == EntityType.OTHER
    assert first.confidence == 1.0
    assert second.type == EntityType.COMPANY
    assert second.confidence == 0.0


def test_parse_drops_invalid_items():
    raw = json.dumps({"suggestions": [
        {"name": "", "type": "person", "confidence": 0.5},
        {"name": "No confidence", "type": "person"},
        {"name": "Text confidence", "type": "person", "confidence": "high"},
        "not an object",
        {"name": "Valid", "type": "industry", "confidence": 0.4},
    ]})
    suggestions = parse_suggestions(raw)
    assert [s.name for s in suggestions] == ['Valid']
    assert suggestions[0].primary_url == ''


def test_parse_caps_results():
    raw = json.dumps({"suggestions": [
        {"name": f"Entity {i}", "type": "other", "confidence": 0.5} for i in range(6)
    ]})
    assert len(parse_suggestions(raw)) == MAX_SUGGESTIONS


def test_parse_rejects_non_json():
    with pytest.raises(ValueError):
        parse_suggestions('not json')


# =============================================================================
# suggest()
# =============================================================================

@pytest.mark.asyncio
async def test_suggest_sends_context_and_uses_json_mode():
    client = make_client(json.dumps({"suggestions": [
        {"name": "Jane Doe", "type": "person", "confidence": 0.8, "primary_url": ""},
    ]}))
    disambiguator = EntityDisambiguator(client=client, model='gpt-4o-mini')

    suggestions = await disambiguator.suggest('Jane', 'Fintech research', ['payments', 'banking'])

    assert [s.name for s in suggestions] == ['Jane Doe']
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs['model'] == 'gpt-4o-mini'
    assert kwargs['response_format'] == {"type": "json_object"}
    user_prompt = kwargs['messages'][1]['content']
    assert 'ENTITY: Jane' in user_prompt
    assert 'CONTEXT: Fintech research' in user_prompt
    assert 'NICHES: payments, banking' in user_prompt


@pytest.mark.asyncio
async def test_suggest_returns_empty_on_api_error():
    disambiguator = EntityDisambiguator(client=make_client(error=OpenAIError("rate limited")))
    assert await disambiguator.suggest('Jane') == []


@pytest.mark.asyncio
async def test_suggest_returns_empty_on_bad_json():
    disambiguator = EntityDisambiguator(client=make_client("I think it's Jane Doe"))
    assert await disambiguator.suggest('Jane') == []


@pytest.mark.asyncio
async def test_suggest_returns_empty_without_api_key(monkeypatch):
    # No client injected and no key anywhere: AsyncOpenAI refuses to construct
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    disambiguator = EntityDisambiguator()
    assert await disambiguator.suggest('Jane') == []


def test_suggestion_to_dict():
    suggestion = EntitySuggestion(name='Acme', type=EntityType.COMPANY, confidence=0.7)
    assert suggestion.to_dict() == {
        'name': 'Acme', 'type': 'company', 'confidence': 0.7, 'primary_url': '',
    }
