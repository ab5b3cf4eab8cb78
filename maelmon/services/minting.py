"""Card instance minting."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.operations import create_instance
from maelmon.models.db import CardDefinitionDB, CardInstanceDB

logger = logging.getLogger(__name__)


async def mint(
    session: AsyncSession, definition: CardDefinitionDB, owner_id: str | None
) -> CardInstanceDB:
    """
    Create an owned copy of a definition.

    Copies the descriptive fields and the supply numbers as they are now.
    Does not touch current_supply; call increment_supply first.
    """
    instance = CardInstanceDB(
        definition_id=definition.id,
        owner_id=owner_id,
        name=definition.name,
        type=definition.type,
        rarity=definition.rarity,
        attack=definition.attack,
        defense=definition.defense,
        character_image_url=definition.character_image_url,
        description=definition.description,
        max_supply=definition.max_supply,
        current_supply=definition.current_supply,
    )
    instance = await create_instance(session, instance)

    logger.debug(
        "CARD_MINTED",
        extra={
            "instance_id": instance.id,
            "definition_id": definition.id,
            "owner_id": owner_id,
        },
    )
    return instance
