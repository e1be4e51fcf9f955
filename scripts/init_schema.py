#!/usr/bin/env python3
"""
Create the curation graph constraints and indexes.

- id uniqueness for Client, Report, Entity, Source, Quote
- (name, type) uniqueness for Entity, where the server supports composite
  uniqueness constraints
- status / is_public indexes used by the publication views

Safe to re-run: every statement is IF NOT EXISTS.

Usage:
    python scripts/init_schema.py
"""
import asyncio
import logging
import sys

from curation_graph.config import create_neo4j_service, get_settings
from curation_graph.errors import StoreError

logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


async def main() -> int:
    try:
        neo4j = await create_neo4j_service()
    except StoreError as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        results = await neo4j.initialize_constraints()
    finally:
        await neo4j.close()

    failed = [name for name, ok in results.items() if not ok]
    logger.info(f"✅ {len(results) - len(failed)}/{len(results)} constraints and indexes ready")
    if failed:
        logger.warning(f"⚠️ Not created: {', '.join(failed)}")
    return 0


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))
