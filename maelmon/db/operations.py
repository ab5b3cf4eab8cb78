"""
Database CRUD operations.

Provides async functions for user accounts, the card definition catalog
and minted card instances. Supply counters are only changed through
conditional UPDATE statements so concurrent claims can never push a
definition past its cap.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import case, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.config import UNLIMITED_SUPPLY
from maelmon.models.card import CardDefinition, CardInstance
from maelmon.models.card_input import CardDefinitionInput
from maelmon.models.db import CardDefinitionDB, CardInstanceDB, UserAccountDB
from maelmon.models.failure import SupplyExhaustedError
from maelmon.models.user import UserAccount, as_utc

# --- User Operations ---


async def get_user(session: AsyncSession, twitch_id: str) -> UserAccountDB | None:
    """
    Get a user account by Twitch id.

    Returns None if no account exists for this identity. Always reloads
    the row so a cooldown check never sees a stale identity-map copy.
    """
    result = await session.execute(
        select(UserAccountDB)
        .where(UserAccountDB.twitch_id == twitch_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    twitch_id: str,
    username: str,
    currency: int,
    display_name: str | None = None,
    profile_image_url: str | None = None,
    email: str | None = None,
) -> UserAccountDB:
    """
    Create a new user account.

    Raises IntegrityError if the Twitch id is already registered.
    """
    user = UserAccountDB(
        twitch_id=twitch_id,
        username=username,
        display_name=display_name,
        profile_image_url=profile_image_url,
        email=email,
        currency=currency,
        is_admin=False,
    )
    session.add(user)
    await session.flush()
    return user


async def sync_user_profile(
    session: AsyncSession,
    twitch_id: str,
    username: str,
    starting_currency: int,
    display_name: str | None = None,
    profile_image_url: str | None = None,
    email: str | None = None,
) -> tuple[UserAccountDB, bool]:
    """
    Create an account on first login or refresh its profile fields.

    Currency, admin flag and claim history are never touched for an
    existing account.

    Returns:
        Tuple of (user, created) where created is True if new.
    """
    user = await get_user(session, twitch_id)
    if user is None:
        user = await create_user(
            session,
            twitch_id=twitch_id,
            username=username,
            currency=starting_currency,
            display_name=display_name,
            profile_image_url=profile_image_url,
            email=email,
        )
        return user, True

    user.username = username
    user.display_name = display_name
    user.profile_image_url = profile_image_url
    if email is not None:
        user.email = email
    await session.flush()
    return user, False


async def credit_currency(session: AsyncSession, user: UserAccountDB, amount: int) -> int:
    """
    Add currency to a user's balance in a single UPDATE.

    Returns the new balance.
    """
    await session.execute(
        update(UserAccountDB)
        .where(UserAccountDB.id == user.id)
        .values(currency=UserAccountDB.currency + amount)
        .execution_options(synchronize_session=False)
    )
    await session.refresh(user, attribute_names=["currency"])
    return user.currency


async def stamp_pack_claimed(session: AsyncSession, user: UserAccountDB, now: datetime) -> None:
    """Record a successful daily pack claim."""
    user.last_pack_claimed = now
    await session.flush()


async def list_user_instances(session: AsyncSession, twitch_id: str) -> list[CardInstanceDB]:
    """Get every card instance owned by a user, oldest first."""
    result = await session.execute(
        select(CardInstanceDB)
        .where(CardInstanceDB.owner_id == twitch_id)
        .order_by(CardInstanceDB.id)
    )
    return list(result.scalars().all())


def user_to_model(user: UserAccountDB, cards: list[CardInstanceDB] | None = None) -> UserAccount:
    """Convert a database user to a domain model."""
    return UserAccount(
        twitch_id=user.twitch_id,
        username=user.username,
        currency=user.currency,
        display_name=user.display_name,
        profile_image_url=user.profile_image_url,
        is_admin=user.is_admin,
        last_pack_claimed=as_utc(user.last_pack_claimed),
        cards=[instance_to_model(card) for card in cards or []],
    )


# --- Card Definition Operations ---


async def find_definition(
    session: AsyncSession, name: str, card_type: str, rarity: str
) -> CardDefinitionDB | None:
    """Get a definition by its exact (name, type, rarity) triple."""
    result = await session.execute(
        select(CardDefinitionDB).where(
            CardDefinitionDB.name == name,
            CardDefinitionDB.type == card_type,
            CardDefinitionDB.rarity == rarity,
        )
    )
    return result.scalar_one_or_none()


async def list_definitions(session: AsyncSession) -> list[CardDefinitionDB]:
    """Get the full catalog, exhausted definitions included."""
    result = await session.execute(select(CardDefinitionDB).order_by(CardDefinitionDB.id))
    return list(result.scalars().all())


async def list_eligible_definitions(session: AsyncSession) -> list[CardDefinitionDB]:
    """Get every definition that still has supply left to mint."""
    result = await session.execute(
        select(CardDefinitionDB)
        .where(
            or_(
                CardDefinitionDB.max_supply == UNLIMITED_SUPPLY,
                CardDefinitionDB.current_supply < CardDefinitionDB.max_supply,
            )
        )
        .order_by(CardDefinitionDB.id)
    )
    return list(result.scalars().all())


async def create_definition(session: AsyncSession, data: CardDefinitionInput) -> CardDefinitionDB:
    """
    Create a new card definition with nothing minted yet.

    Raises IntegrityError if the (name, type, rarity) triple already exists.
    """
    definition = CardDefinitionDB(
        name=data.name,
        type=data.type,
        rarity=data.rarity,
        attack=data.attack,
        defense=data.defense,
        character_image_url=data.character_image_url,
        description=data.description,
        max_supply=data.max_supply,
        current_supply=0,
    )
    session.add(definition)
    await session.flush()
    return definition


async def restock_definition(
    session: AsyncSession, definition: CardDefinitionDB, added_supply: int
) -> CardDefinitionDB:
    """
    Raise a definition's cap by added_supply.

    Unlimited on either side makes the result unlimited. Done in SQL so a
    concurrent claim's increment is never overwritten.
    """
    new_max: Any
    if added_supply == UNLIMITED_SUPPLY:
        new_max = UNLIMITED_SUPPLY
    else:
        new_max = case(
            (CardDefinitionDB.max_supply == UNLIMITED_SUPPLY, UNLIMITED_SUPPLY),
            else_=CardDefinitionDB.max_supply + added_supply,
        )
    await session.execute(
        update(CardDefinitionDB)
        .where(CardDefinitionDB.id == definition.id)
        .values(max_supply=new_max)
        .execution_options(synchronize_session=False)
    )
    await session.refresh(definition)
    return definition


async def add_or_restock_definition(
    session: AsyncSession, data: CardDefinitionInput
) -> tuple[CardDefinitionDB, bool]:
    """
    Create a definition, or top up an existing one with the same triple.

    A restock without an explicit max_supply adds nothing to the cap;
    only an explicit -1 lifts it.

    Returns:
        Tuple of (definition, created) where created is True if new.
    """
    existing = await find_definition(session, data.name, data.type, data.rarity)
    if existing is not None:
        added = data.max_supply if "max_supply" in data.model_fields_set else 0
        return await restock_definition(session, existing, added), False

    return await create_definition(session, data), True


async def increment_supply(session: AsyncSession, definition: CardDefinitionDB) -> CardDefinitionDB:
    """
    Count one more minted copy against a definition.

    The cap is checked by the UPDATE itself, not by the caller's copy of
    the row, so two claims racing for the last copy cannot both succeed.

    Raises:
        SupplyExhaustedError: If the definition is already at its cap
    """
    result = await session.execute(
        update(CardDefinitionDB)
        .where(
            CardDefinitionDB.id == definition.id,
            or_(
                CardDefinitionDB.max_supply == UNLIMITED_SUPPLY,
                CardDefinitionDB.current_supply < CardDefinitionDB.max_supply,
            ),
        )
        .values(current_supply=CardDefinitionDB.current_supply + 1)
        .execution_options(synchronize_session=False)
    )
    # rowcount is available on UPDATE results; type stubs incomplete for async
    if int(result.rowcount) == 0:  # type: ignore[attr-defined]
        raise SupplyExhaustedError(definition.id, definition.name)

    await session.refresh(definition)
    return definition


def definition_to_model(definition: CardDefinitionDB) -> CardDefinition:
    """Convert a database definition to a domain model."""
    return CardDefinition(
        id=definition.id,
        name=definition.name,
        type=definition.type,
        rarity=definition.rarity,
        attack=definition.attack,
        defense=definition.defense,
        character_image_url=definition.character_image_url,
        max_supply=definition.max_supply,
        current_supply=definition.current_supply,
        description=definition.description,
    )


# --- Card Instance Operations ---


async def create_instance(session: AsyncSession, instance: CardInstanceDB) -> CardInstanceDB:
    """Persist a freshly minted instance."""
    session.add(instance)
    await session.flush()
    return instance


def instance_to_model(instance: CardInstanceDB) -> CardInstance:
    """Convert a database instance to a domain model."""
    return CardInstance(
        id=instance.id,
        name=instance.name,
        type=instance.type,
        rarity=instance.rarity,
        attack=instance.attack,
        defense=instance.defense,
        character_image_url=instance.character_image_url,
        max_supply=instance.max_supply,
        current_supply=instance.current_supply,
        owner_id=instance.owner_id,
        definition_id=instance.definition_id,
        description=instance.description,
    )
