"""
Card catalog API endpoints.

Public catalog listing and the admin add-card operation.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.api.dependencies import require_admin
from maelmon.api.schemas import AddCardResponse, CardDefinitionResponse
from maelmon.db import definition_to_model, list_definitions
from maelmon.db.database import get_session
from maelmon.models.db import UserAccountDB
from maelmon.services.catalog import add_card

router = APIRouter(prefix="/api", tags=["cards"])


@router.get("/cards", response_model=list[CardDefinitionResponse])
async def list_cards(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[CardDefinitionResponse]:
    """
    List every card definition with its remaining supply.

    Sold-out definitions are included and flagged as exhausted.
    """
    definitions = await list_definitions(session)
    return [CardDefinitionResponse.from_model(definition_to_model(d)) for d in definitions]


@router.post(
    "/admin/cards",
    response_model=AddCardResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": AddCardResponse}},
)
async def add_card_definition(
    response: Response,
    payload: Annotated[Any, Body(...)],
    _admin: Annotated[UserAccountDB, Depends(require_admin)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AddCardResponse:
    """
    Add a card to the catalog (admin only).

    A submission matching an existing definition's name, type and rarity
    restocks it: its max_supply is raised by the submitted max_supply
    (-1 on either side makes it unlimited, omitted adds nothing). Returns
    201 for a new definition and 200 for a restock. Invalid fields or a
    body that is not an object return 400.
    """
    update = await add_card(session, payload)

    if update.created:
        message = "Card added successfully!"
    else:
        response.status_code = status.HTTP_200_OK
        message = "Card restocked successfully!"

    return AddCardResponse(
        message=message,
        card=CardDefinitionResponse.from_model(update.definition),
        created=update.created,
    )
