"""
Timestamps on curation nodes.

created_at / updated_at are written with Cypher datetime() and come back as
neo4j.time.DateTime. Models keep Python datetimes; payloads carry ISO strings.
"""
import logging
from datetime import datetime
from typing import Optional

from neo4j.time import DateTime

logger = logging.getLogger(__name__)


def neo4j_datetime_to_python(value) -> Optional[datetime]:
    """
    Normalize a stored timestamp.

    Accepts neo4j DateTime, datetime, an ISO string (rows written by older
    tooling), or None. Anything else is logged and dropped.
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, DateTime):
        return value.to_native()
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Unparseable timestamp {value!r}")
            return None
    logger.warning(f"Unsupported timestamp type {type(value).__name__}")
    return None


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
