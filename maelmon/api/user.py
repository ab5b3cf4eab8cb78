"""
User API endpoints.

Daily pack claims, the caller's profile and the login profile sync.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.api.dependencies import current_twitch_id
from maelmon.api.schemas import (
    CardResponse,
    ClaimResponse,
    ProfileSyncRequest,
    ProfileSyncResponse,
    UserResponse,
)
from maelmon.db.database import get_session
from maelmon.services.accounts import get_account, sync_profile
from maelmon.services.claims import claim_daily_pack

router = APIRouter(prefix="/api", tags=["user"])


def claim_message(card_name: str, bonus: int) -> str:
    """User-facing confirmation for a successful claim."""
    if bonus:
        return f"You claimed your daily pack and received {card_name} and {bonus} currency!"
    return f"You claimed your daily pack and received {card_name}!"


@router.get("/user", response_model=UserResponse)
async def get_current_user(
    twitch_id: Annotated[str, Depends(current_twitch_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserResponse:
    """
    Get the logged-in user's profile.

    Includes balance, last claim time and every owned card.
    """
    account = await get_account(session, twitch_id)

    return UserResponse(
        username=account.username,
        display_name=account.display_name,
        profile_image_url=account.profile_image_url,
        currency=account.currency,
        is_admin=account.is_admin,
        last_pack_claimed=account.last_pack_claimed,
        cards=[CardResponse.from_model(card) for card in account.cards],
        card_counts=account.card_counts(),
    )


@router.post("/user/claim-daily-pack", response_model=ClaimResponse)
async def claim_pack(
    twitch_id: Annotated[str, Depends(current_twitch_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ClaimResponse:
    """
    Redeem the caller's daily pack.

    Grants one randomly selected card that still has supply left, plus the
    configured currency bonus. Failures are rendered by the KnownError
    handler: cooldown (400, with hours/minutes), unknown user (404),
    sold out (404), lost supply race (409), storage (500).
    """
    result = await claim_daily_pack(session, twitch_id)

    return ClaimResponse(
        message=claim_message(result.card.name, result.bonus),
        card=CardResponse.from_model(result.card),
        currency=result.new_currency,
    )


@router.post("/auth/profile", response_model=ProfileSyncResponse)
async def sync_login_profile(
    request: ProfileSyncRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProfileSyncResponse:
    """
    Create or refresh an account after a successful OAuth login.

    Called by the login gateway, not by browsers. New accounts start with
    the configured starting currency; existing accounts only get their
    display fields refreshed.
    """
    user, created = await sync_profile(
        session,
        twitch_id=request.twitch_id,
        username=request.username,
        display_name=request.display_name,
        profile_image_url=request.profile_image_url,
        email=request.email,
    )

    return ProfileSyncResponse(
        twitch_id=user.twitch_id,
        username=user.username,
        currency=user.currency,
        created=created,
    )
