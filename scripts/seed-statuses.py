#!/usr/bin/env python3
"""
NexBoard — Status Seeder
Creates the default task statuses on a fresh database. Statuses that
already exist (by name) are left alone, so the script is safe to re-run.

Usage:
    python scripts/seed-statuses.py
    python scripts/seed-statuses.py --status "Backlog" --status "Doing" --status "Done"
    python scripts/seed-statuses.py --create-tables

DATABASE_URL selects the target database, as for the API.
"""

import argparse
import asyncio
import logging

from database import get_db_context, init_db, close_db
from services.statuses import StatusService, DEFAULT_STATUSES

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s %(message)s")
logger = logging.getLogger("nexboard.seed")


async def seed(names, create_tables: bool) -> None:
    if create_tables:
        await init_db()
    try:
        async with get_db_context() as session:
            created = await StatusService(session).seed_defaults(names)
        if not created:
            logger.info("Nothing to seed; all statuses already exist")
        for status in created:
            print(f"{status.position:>3}  {status.name}  ({status.external_id})")
    finally:
        await close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed NexBoard task statuses")
    parser.add_argument(
        "--status", action="append", dest="statuses",
        help="status name, in board order (repeatable; defaults to To Do / In Progress / Done)",
    )
    parser.add_argument(
        "--create-tables", action="store_true",
        help="create missing tables first (local SQLite runs)",
    )
    args = parser.parse_args()
    asyncio.run(seed(args.statuses or DEFAULT_STATUSES, args.create_tables))


if __name__ == "__main__":
    main()
