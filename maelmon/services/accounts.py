"""
User account lifecycle.

Accounts are created by the login flow (profile sync) or, as a fallback,
on the first chat message from an identity the system has not seen.
Every new account starts with settings.starting_currency.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.config import settings
from maelmon.db.operations import get_user, list_user_instances, sync_user_profile, user_to_model
from maelmon.models.db import UserAccountDB
from maelmon.models.failure import StorageError, UnknownUserError
from maelmon.models.user import UserAccount

logger = logging.getLogger(__name__)


async def sync_profile(
    session: AsyncSession,
    twitch_id: str,
    username: str,
    display_name: str | None = None,
    profile_image_url: str | None = None,
    email: str | None = None,
) -> tuple[UserAccountDB, bool]:
    """
    Create or refresh an account from the identity provider's profile.

    Returns:
        Tuple of (user, created) where created is True if new.
    """
    try:
        user, created = await sync_user_profile(
            session,
            twitch_id=twitch_id,
            username=username,
            starting_currency=settings.starting_currency,
            display_name=display_name,
            profile_image_url=profile_image_url,
            email=email,
        )
    except SQLAlchemyError as e:
        logger.exception("PROFILE_SYNC_STORAGE_FAILURE", extra={"twitch_id": twitch_id})
        await session.rollback()
        raise StorageError("sync_profile") from e

    if created:
        logger.info("USER_REGISTERED", extra={"twitch_id": twitch_id, "username": username})
    else:
        logger.info("USER_LOGGED_IN", extra={"twitch_id": twitch_id, "username": username})
    return user, created


async def get_account(session: AsyncSession, twitch_id: str) -> UserAccount:
    """
    Load a user together with every card they own.

    Raises:
        UnknownUserError: If no account exists for this identity
    """
    try:
        user = await get_user(session, twitch_id)
        if user is None:
            raise UnknownUserError(twitch_id)
        cards = await list_user_instances(session, twitch_id)
    except SQLAlchemyError as e:
        raise StorageError("get_account") from e
    return user_to_model(user, cards)
