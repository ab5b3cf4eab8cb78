"""
Chat message entry point.

The chat client (connection, reconnects, channel joins) is outside this
package. It calls `handle_message` for every message with the platform's
per-message tags and a reply sink for the channel.

Tags used (Twitch IRC naming): "user-id", "username", "display-name".
"""

import logging
from collections.abc import Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maelmon.bot.commands import COMMANDS, ChatContext, ReplySink, parse_command
from maelmon.config import settings
from maelmon.db.database import session_scope
from maelmon.db.operations import create_user, get_user
from maelmon.models.failure import KnownError

logger = logging.getLogger(__name__)


async def register_chatter(
    session: AsyncSession, sender_id: str, username: str, display_name: str
) -> bool:
    """
    Create an account for a chat identity seen for the first time.

    Returns True if an account was created.
    """
    if await get_user(session, sender_id) is not None:
        return False

    await create_user(
        session,
        twitch_id=sender_id,
        username=username,
        display_name=display_name,
        currency=settings.starting_currency,
    )
    logger.info("USER_REGISTERED_FROM_CHAT", extra={"twitch_id": sender_id, "username": username})
    return True


async def handle_message(
    tags: Mapping[str, str | None],
    message: str,
    reply: ReplySink,
    *,
    self_message: bool = False,
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> bool:
    """
    Process one chat message.

    Ignores the bot's own messages and messages without a sender id.
    Registers unseen senders when chat_auto_register is on, then runs the
    matching command, if any.

    Returns True if a command was dispatched.
    """
    if self_message:
        return False

    sender_id = tags.get("user-id")
    if not sender_id:
        return False

    username = tags.get("username") or sender_id
    display_name = tags.get("display-name") or username
    parsed = parse_command(message)

    try:
        async with session_scope(factory) as session:
            if settings.chat_auto_register and await register_chatter(
                session, sender_id, username, display_name
            ):
                await session.commit()
                await reply(
                    f"Welcome to MaelMon, {display_name}! Type !currency to check your balance."
                )

            if parsed is None:
                return False

            token, args = parsed
            ctx = ChatContext(
                sender_id=sender_id,
                username=username,
                display_name=display_name,
                reply=reply,
                args=args,
            )
            logger.debug("CHAT_COMMAND", extra={"token": token, "sender_id": sender_id})
            await COMMANDS[token].handler(session, ctx)
            return True
    except (KnownError, SQLAlchemyError):
        logger.exception("CHAT_COMMAND_FAILED", extra={"sender_id": sender_id})
        await reply(f"@{display_name}, something went wrong. Please try again later.")
        return parsed is not None
