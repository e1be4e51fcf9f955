#!/usr/bin/env python3
"""
Migration script: give every Source and Entity a publication status

Nodes created before the publication workflow existed carry no status
property. Readers already treat them as 'pending'; this script writes that
value so status filters and indexes see them.

Usage:
    python scripts/migrate_source_status.py [--dry-run]
"""
import asyncio
import argparse
import logging
import sys

from curation_graph.config import create_neo4j_service, get_settings
from curation_graph.errors import StoreError
from curation_graph.models.status import PublicationStatus
from curation_graph.services.neo4j_service import Neo4jService

logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)

LABELS = ('Source', 'Entity')


async def migrate_status(neo4j: Neo4jService, dry_run: bool = False) -> dict:
    """
    Set status='pending' on Sources and Entities that have none.

    Returns:
        label -> number of nodes missing a status (dry run) or updated
    """
    counts = {}
    async with neo4j.transaction() as tx:
        for label in LABELS:
            if dry_run:
                row = await tx.single(f"""
                    MATCH (n:{label})
                    WHERE n.status IS NULL
                    RETURN count(n) AS count
                """)
            else:
                row = await tx.single(f"""
                    MATCH (n:{label})
                    WHERE n.status IS NULL
                    SET n.status = $status
                    RETURN count(n) AS count
                """, {'status': PublicationStatus.PENDING.value})
            counts[label] = row['count'] if row else 0

            verb = 'would be updated' if dry_run else 'updated'
            logger.info(f"{label}: {counts[label]} node(s) {verb}")
    return counts


async def main() -> int:
    parser = argparse.ArgumentParser(description='Backfill Source/Entity publication status')
    parser.add_argument('--dry-run', action='store_true', help='Count affected nodes without writing')
    args = parser.parse_args()

    try:
        neo4j = await create_neo4j_service()
    except StoreError as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        counts = await migrate_status(neo4j, dry_run=args.dry_run)
    finally:
        await neo4j.close()

    mode = "DRY RUN" if args.dry_run else "APPLIED"
    logger.info(f"✅ {mode}: {sum(counts.values())} node(s) without status")
    if args.dry_run:
        logger.info("💡 Run without --dry-run to write the changes")
    return 0


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))
