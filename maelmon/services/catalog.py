"""
Card catalog administration.

Adds new card definitions or restocks existing ones. A submission whose
(name, type, rarity) matches an existing definition tops up that
definition's cap instead of creating a duplicate.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.operations import add_or_restock_definition, definition_to_model
from maelmon.models.card import CardDefinition
from maelmon.models.card_input import CardDefinitionInput, parse_card_definition_input
from maelmon.models.failure import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CatalogUpdate:
    """Result of an add-card submission."""

    definition: CardDefinition
    created: bool


async def add_card(
    session: AsyncSession, payload: Mapping[str, Any] | CardDefinitionInput
) -> CatalogUpdate:
    """
    Validate an admin submission and create or restock the definition.

    Raises:
        ValidationError: If required fields are missing or malformed
        StorageError: If the database write fails
    """
    data = (
        payload
        if isinstance(payload, CardDefinitionInput)
        else parse_card_definition_input(payload)
    )

    try:
        definition, created = await add_or_restock_definition(session, data)
    except SQLAlchemyError as e:
        logger.exception("CATALOG_STORAGE_FAILURE", extra={"card_name": data.name})
        await session.rollback()
        raise StorageError("add_card") from e

    logger.info(
        "CARD_DEFINITION_CREATED" if created else "CARD_DEFINITION_RESTOCKED",
        extra={
            "definition_id": definition.id,
            "card_name": definition.name,
            "max_supply": definition.max_supply,
            "current_supply": definition.current_supply,
        },
    )
    return CatalogUpdate(definition=definition_to_model(definition), created=created)
