"""Tests for the card seeding job."""

import json
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.operations import list_definitions
from maelmon.jobs.seed_cards import load_entries, seed_cards

ENTRIES = [
    {
        "name": "Maelstrom",
        "type": "Attack",
        "rarity": "Legendary",
        "characterImageUrl": "https://img.example/maelstrom.png",
        "attack": 9,
        "maxSupply": 10,
    },
    {
        "name": "Ember",
        "type": "Support",
        "rarity": "Common",
        "characterImageUrl": "https://img.example/ember.png",
    },
]


class TestLoadEntries:
    def test_reads_list_of_objects(self, tmp_path: Path) -> None:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps(ENTRIES), encoding="utf-8")

        assert load_entries(path) == ENTRIES

    def test_rejects_non_list(self, tmp_path: Path) -> None:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps({"name": "Maelstrom"}), encoding="utf-8")

        with pytest.raises(ValueError, match="JSON list"):
            load_entries(path)


class TestSeedCards:
    async def test_creates_definitions(self, session: AsyncSession, session_factory) -> None:
        results = await seed_cards(ENTRIES, factory=session_factory)

        assert results == {"created": 2, "restocked": 0, "skipped": 0}
        definitions = await list_definitions(session)
        assert {d.name: d.max_supply for d in definitions} == {"Maelstrom": 10, "Ember": -1}

    async def test_rerun_restocks(self, session: AsyncSession, session_factory) -> None:
        await seed_cards(ENTRIES, factory=session_factory)

        results = await seed_cards(ENTRIES, factory=session_factory)

        assert results == {"created": 0, "restocked": 2, "skipped": 0}
        definitions = await list_definitions(session)
        assert {d.name: d.max_supply for d in definitions} == {"Maelstrom": 20, "Ember": -1}

    async def test_invalid_entry_skipped(self, session: AsyncSession, session_factory) -> None:
        entries = [*ENTRIES, {"name": "Broken", "type": "Attack"}]

        results = await seed_cards(entries, factory=session_factory)

        assert results == {"created": 2, "restocked": 0, "skipped": 1}
        assert len(await list_definitions(session)) == 2
