"""Tests for database operations."""

from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.operations import (
    add_or_restock_definition,
    create_user,
    credit_currency,
    definition_to_model,
    find_definition,
    get_user,
    increment_supply,
    list_definitions,
    list_eligible_definitions,
    list_user_instances,
    stamp_pack_claimed,
    sync_user_profile,
    user_to_model,
)
from maelmon.models.card_input import CardDefinitionInput
from maelmon.models.failure import SupplyExhaustedError
from maelmon.services.minting import mint


def _input(**overrides: object) -> CardDefinitionInput:
    fields: dict[str, object] = {
        "name": "Maelstrom",
        "type": "Attack",
        "rarity": "Legendary",
        "character_image_url": "https://img.example/maelstrom.png",
        "attack": 9,
        "defense": 4,
        "max_supply": 5,
    }
    fields.update(overrides)
    return CardDefinitionInput.model_validate(fields)


class TestUserOperations:
    async def test_get_missing_user(self, session: AsyncSession) -> None:
        assert await get_user(session, "nobody") is None

    async def test_create_and_get_user(self, session: AsyncSession) -> None:
        await create_user(session, twitch_id="1001", username="viewer", currency=100)
        await session.commit()

        user = await get_user(session, "1001")

        assert user is not None
        assert user.username == "viewer"
        assert user.currency == 100
        assert user.is_admin is False

    async def test_create_duplicate_twitch_id_fails(self, session: AsyncSession) -> None:
        await create_user(session, twitch_id="1001", username="viewer", currency=100)
        with pytest.raises(IntegrityError):
            await create_user(session, twitch_id="1001", username="again", currency=100)

    async def test_sync_creates_with_starting_currency(self, session: AsyncSession) -> None:
        user, created = await sync_user_profile(
            session, twitch_id="1001", username="viewer", starting_currency=250
        )

        assert created is True
        assert user.currency == 250

    async def test_sync_existing_refreshes_profile_only(
        self, session: AsyncSession, make_user
    ) -> None:
        await make_user("1001", currency=42, is_admin=True)

        user, created = await sync_user_profile(
            session,
            twitch_id="1001",
            username="renamed",
            starting_currency=250,
            display_name="Renamed",
            profile_image_url="https://img.example/me.png",
        )

        assert created is False
        assert user.username == "renamed"
        assert user.display_name == "Renamed"
        assert user.currency == 42
        assert user.is_admin is True

    async def test_credit_currency(self, session: AsyncSession, make_user) -> None:
        user = await make_user("1001", currency=100)

        balance = await credit_currency(session, user, 25)

        assert balance == 125
        assert user.currency == 125

    async def test_stamp_pack_claimed(self, session: AsyncSession, make_user) -> None:
        user = await make_user("1001")
        now = datetime(2026, 3, 1, 18, 30, tzinfo=UTC)

        await stamp_pack_claimed(session, user, now)
        await session.commit()

        reloaded = await get_user(session, "1001")
        assert reloaded is not None
        assert user_to_model(reloaded).last_pack_claimed == now


class TestDefinitionOperations:
    async def test_add_creates_new_definition(self, session: AsyncSession) -> None:
        definition, created = await add_or_restock_definition(session, _input())

        assert created is True
        assert definition.max_supply == 5
        assert definition.current_supply == 0

    async def test_add_same_triple_restocks(self, session: AsyncSession) -> None:
        await add_or_restock_definition(session, _input(max_supply=5))

        definition, created = await add_or_restock_definition(session, _input(max_supply=3))

        assert created is False
        assert definition.max_supply == 8
        assert len(await list_definitions(session)) == 1

    async def test_restock_with_unlimited_makes_unlimited(self, session: AsyncSession) -> None:
        await add_or_restock_definition(session, _input(max_supply=5))

        definition, _ = await add_or_restock_definition(session, _input(max_supply=-1))

        assert definition.max_supply == -1

    async def test_restock_unlimited_stays_unlimited(self, session: AsyncSession) -> None:
        await add_or_restock_definition(session, _input(max_supply=-1))

        definition, _ = await add_or_restock_definition(session, _input(max_supply=10))

        assert definition.max_supply == -1

    async def test_restock_without_max_supply_keeps_cap(
        self, session: AsyncSession, make_definition
    ) -> None:
        """Leaving max_supply out of a restock must not lift the cap."""
        await make_definition("Limited", max_supply=5)
        data = CardDefinitionInput.model_validate(
            {
                "name": "Limited",
                "type": "Attack",
                "rarity": "Common",
                "characterImageUrl": "https://img.example/limited.png",
            }
        )

        definition, created = await add_or_restock_definition(session, data)

        assert created is False
        assert definition.max_supply == 5

    async def test_restock_keeps_minted_count(self, session: AsyncSession, make_definition) -> None:
        await make_definition("Maelstrom", rarity="Legendary", max_supply=2, current_supply=2)

        definition, created = await add_or_restock_definition(session, _input(max_supply=3))

        assert created is False
        assert definition.max_supply == 5
        assert definition.current_supply == 2

    async def test_find_definition_exact_triple(self, session: AsyncSession, make_definition) -> None:
        await make_definition("Maelstrom", rarity="Common")

        assert await find_definition(session, "Maelstrom", "Attack", "Common") is not None
        assert await find_definition(session, "Maelstrom", "Attack", "Rare") is None

    async def test_eligible_excludes_exhausted(self, session: AsyncSession, make_definition) -> None:
        await make_definition("Unlimited", max_supply=-1, current_supply=40)
        await make_definition("Capped", max_supply=3, current_supply=2)
        await make_definition("SoldOut", max_supply=3, current_supply=3)
        await make_definition("ZeroCap", max_supply=0, current_supply=0)

        eligible = await list_eligible_definitions(session)

        assert [d.name for d in eligible] == ["Unlimited", "Capped"]
        assert len(await list_definitions(session)) == 4

    async def test_definition_to_model(self, make_definition) -> None:
        definition = await make_definition("Capped", max_supply=3, current_supply=1)

        model = definition_to_model(definition)

        assert model.name == "Capped"
        assert model.remaining_supply == 2
        assert model.is_exhausted is False


class TestIncrementSupply:
    async def test_increments_capped(self, session: AsyncSession, make_definition) -> None:
        definition = await make_definition("Capped", max_supply=2)

        await increment_supply(session, definition)

        assert definition.current_supply == 1

    async def test_last_copy_then_exhausted(self, session: AsyncSession, make_definition) -> None:
        definition = await make_definition("Solo", max_supply=1)

        await increment_supply(session, definition)
        with pytest.raises(SupplyExhaustedError) as exc_info:
            await increment_supply(session, definition)

        assert exc_info.value.definition_id == definition.id
        assert definition.current_supply == 1

    async def test_unlimited_keeps_counting(self, session: AsyncSession, make_definition) -> None:
        definition = await make_definition("Unlimited", max_supply=-1)

        for _ in range(3):
            await increment_supply(session, definition)

        assert definition.current_supply == 3

    async def test_stale_copy_cannot_overshoot(
        self, session: AsyncSession, session_factory, make_definition
    ) -> None:
        """A copy read before another writer took the last unit is refused."""
        definition = await make_definition("Solo", max_supply=1)

        async with session_factory() as other:
            other_copy = await other.get(type(definition), definition.id)
            assert other_copy is not None
            await increment_supply(other, other_copy)
            await other.commit()

        # Our in-memory copy still says 0/1
        assert definition.current_supply == 0
        with pytest.raises(SupplyExhaustedError):
            await increment_supply(session, definition)


class TestInstanceOperations:
    async def test_mint_snapshots_definition(
        self, session: AsyncSession, make_definition
    ) -> None:
        definition = await make_definition("Capped", max_supply=3)
        await increment_supply(session, definition)

        instance = await mint(session, definition, "1001")
        await session.commit()

        assert instance.owner_id == "1001"
        assert instance.definition_id == definition.id
        assert instance.name == "Capped"
        assert instance.max_supply == 3
        assert instance.current_supply == 1

    async def test_list_user_instances(self, session: AsyncSession, make_definition) -> None:
        definition = await make_definition("Unlimited")
        await mint(session, definition, "1001")
        await mint(session, definition, "1001")
        await mint(session, definition, "2002")
        await session.commit()

        mine = await list_user_instances(session, "1001")

        assert len(mine) == 2
        assert all(card.owner_id == "1001" for card in mine)
