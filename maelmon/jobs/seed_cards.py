"""
Job to load card definitions from a JSON file.

Each entry goes through the same add-or-restock path as the admin API, so
re-running the job with the same file tops up supply caps rather than
duplicating cards.

File format: a JSON list of objects with the admin add-card fields, e.g.
    [{"name": "Maelstrom", "type": "Attack", "rarity": "Legendary",
      "characterImageUrl": "https://...", "attack": 9, "maxSupply": 10}]
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maelmon.db.database import init_db, session_scope
from maelmon.models.failure import KnownError
from maelmon.services.catalog import add_card

logger = logging.getLogger(__name__)


def load_entries(path: Path) -> list[dict[str, Any]]:
    """
    Read card entries from a JSON file.

    Raises:
        ValueError: If the file is not a JSON list of objects
    """
    with path.open(encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
        msg = f"{path} must contain a JSON list of card objects"
        raise ValueError(msg)
    return data


async def seed_cards(
    entries: list[dict[str, Any]],
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> dict[str, int]:
    """
    Add or restock every entry, one transaction per entry.

    Invalid entries are logged and skipped.

    Returns:
        Counts of created, restocked and skipped entries
    """
    results = {"created": 0, "restocked": 0, "skipped": 0}

    for index, entry in enumerate(entries):
        try:
            async with session_scope(factory) as session:
                update = await add_card(session, entry)
        except KnownError as e:
            logger.warning("Skipping entry %d (%s): %s", index, entry.get("name"), e.message)
            results["skipped"] += 1
            continue

        results["created" if update.created else "restocked"] += 1

    logger.info(
        "Seed complete. Created %d, restocked %d, skipped %d",
        results["created"],
        results["restocked"],
        results["skipped"],
    )
    return results


async def run_seed(path: Path) -> dict[str, int]:
    """Create tables if needed and seed from a file."""
    await init_db()
    return await seed_cards(load_entries(path))


def main() -> None:
    """CLI entry point for seeding the card catalog."""
    parser = argparse.ArgumentParser(description="Load MaelMon card definitions from JSON")
    parser.add_argument("path", type=Path, help="JSON file with a list of card definitions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_seed(args.path))


if __name__ == "__main__":
    main()
