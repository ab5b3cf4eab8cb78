"""
Request identity dependencies.

The OAuth login flow and session storage live in the gateway in front of
this service. The gateway resolves the session and forwards the caller's
Twitch id in the X-Twitch-Id header; requests without it are rejected.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.database import get_session
from maelmon.db.operations import get_user
from maelmon.models.db import UserAccountDB
from maelmon.models.failure import NotAuthorizedError

IDENTITY_HEADER = "X-Twitch-Id"


async def current_twitch_id(
    twitch_id: Annotated[str | None, Header(alias=IDENTITY_HEADER)] = None,
) -> str:
    """Resolve the authenticated caller's Twitch id."""
    if not twitch_id or not twitch_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return twitch_id.strip()


async def require_admin(
    twitch_id: Annotated[str, Depends(current_twitch_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserAccountDB:
    """Resolve the caller and insist on the admin flag."""
    user = await get_user(session, twitch_id)
    if user is None or not user.is_admin:
        raise NotAuthorizedError()
    return user
