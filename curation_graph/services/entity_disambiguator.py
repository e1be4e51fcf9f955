"""
Entity Disambiguator - LLM suggestions for which real-world entity a name means

Given a raw name plus the owning client's context and niches, asks the model
for its top real-world matches. Used to pre-fill entity creation; nothing is
written to the graph here.

Contract:
- at most MAX_SUGGESTIONS results
- confidence clamped to [0, 1], type coerced to person|company|industry|other
- items without a name or a numeric confidence are dropped
- any LLM or parse failure is logged and returns []
"""
import json
import logging
from dataclasses import dataclass
from typing import List, Optional

from openai import AsyncOpenAI, OpenAIError

from curation_graph.models.entity import EntityType

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3

SYSTEM_PROMPT = """You identify real-world entities for a research team.
Given an entity name, the client's context and niches, list the most likely
real-world matches.

Return JSON:
{"suggestions": [{"name": "", "type": "person|company|industry|other", "confidence": 0.0, "primary_url": ""}]}

Return at most 3 suggestions, most likely first. primary_url is the entity's
official site or best reference page, or "" if unknown."""


@dataclass
class EntitySuggestion:
    name: str
    type: EntityType
    confidence: float
    primary_url: str = ''

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'type': self.type.value,
            'confidence': self.confidence,
            'primary_url': self.primary_url,
        }


def parse_suggestions(raw: str) -> List[EntitySuggestion]:
    """
    Parse model output into suggestions.

    Accepts {"suggestions": [...]} or a bare JSON array.

    Raises:
        ValueError: output is not JSON
    """
    data = json.loads(raw)
    if isinstance(data, dict):
        data = data.get('suggestions') or []
    if not isinstance(data, list):
        return []

    suggestions = []
    for item in data:
        if not isinstance(item, dict):
            continue
        name = item.get('name')
        confidence = item.get('confidence')
        if not isinstance(name, str) or not name.strip():
            continue
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            continue

        try:
            entity_type = EntityType(str(item.get('type') or 'other').lower())
        except ValueError:
            entity_type = EntityType.OTHER

        suggestions.append(EntitySuggestion(
            name=name.strip(),
            type=entity_type,
            confidence=max(0.0, min(1.0, float(confidence))),
            primary_url=item.get('primary_url') or item.get('primaryUrl') or '',
        ))
        if len(suggestions) == MAX_SUGGESTIONS:
            break

    return suggestions


class EntityDisambiguator:
    """Thin client over the chat completions API (JSON mode)."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: str = None,
        timeout: float = None,
    ):
        from curation_graph.config.settings import get_settings
        settings = get_settings()

        self.model = model or settings.disambiguation_model
        self.timeout = timeout or settings.disambiguation_timeout
        self.api_key = settings.openai_api_key or None
        self.client = client

    def _get_client(self) -> AsyncOpenAI:
        # Built lazily: AsyncOpenAI refuses to construct without an API key
        if self.client is None:
            self.client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self.client

    async def suggest(
        self, name: str, context: str = '', niches: Optional[List[str]] = None
    ) -> List[EntitySuggestion]:
        user_prompt = (
            f"ENTITY: {name}\n"
            f"CONTEXT: {context or ''}\n"
            f"NICHES: {', '.join(niches or [])}"
        )

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt}
                ],
                response_format={"type": "json_object"},
                temperature=0,
                max_tokens=512
            )
            raw_response = response.choices[0].message.content or ''
            suggestions = parse_suggestions(raw_response)
        except OpenAIError as e:
            logger.error(f"Disambiguation failed for {name!r}: {e}")
            return []
        except ValueError as e:
            logger.error(f"Unparseable disambiguation response for {name!r}: {e}")
            return []

        logger.debug(f"Disambiguated {name!r}: {[s.name for s in suggestions]}")
        return suggestions
