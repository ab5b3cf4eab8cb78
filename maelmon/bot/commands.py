"""
Chat command table.

Each command token maps to one handler. Every handler receives the same
normalized ChatContext and answers with a single chat line through
ctx.reply. Handlers render known failures themselves; only unexpected
exceptions escape.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.db.operations import get_user, list_user_instances
from maelmon.models.failure import (
    CooldownActiveError,
    KnownError,
    NoEligibleCardsError,
    SupplyExhaustedError,
    UnknownUserError,
)
from maelmon.services.claims import claim_daily_pack

logger = logging.getLogger(__name__)

ReplySink = Callable[[str], Awaitable[None]]


@dataclass(frozen=True)
class ChatContext:
    """
    Normalized view of one chat command.

    Attributes:
        sender_id: Platform user id of the sender (Twitch user-id tag)
        username: Login name of the sender
        display_name: Name to address the sender by
        args: Words following the command token
        reply: Sends one line back to the channel
    """

    sender_id: str
    username: str
    display_name: str
    reply: ReplySink
    args: list[str] = field(default_factory=list)


CommandHandler = Callable[[AsyncSession, ChatContext], Awaitable[None]]


@dataclass(frozen=True)
class ChatCommand:
    """A chat command and its handler."""

    token: str
    description: str
    handler: CommandHandler


NOT_LINKED_MESSAGE = (
    "@{name}, I couldn't find your account. "
    "Log in on the website to link your Twitch account first."
)


async def claim_command(session: AsyncSession, ctx: ChatContext) -> None:
    """!claim: redeem the daily pack."""
    name = ctx.display_name
    try:
        result = await claim_daily_pack(session, ctx.sender_id)
    except UnknownUserError:
        await ctx.reply(NOT_LINKED_MESSAGE.format(name=name))
        return
    except CooldownActiveError as e:
        await ctx.reply(
            f"@{name}, you already claimed your daily pack. "
            f"Try again in {e.hours}h {e.minutes}m."
        )
        return
    except NoEligibleCardsError:
        await ctx.reply(f"Sorry @{name}, there are no cards left to claim right now.")
        return
    except SupplyExhaustedError as e:
        await ctx.reply(f"@{name}, the last {e.name} was just taken. Type !claim to draw again.")
        return
    except KnownError as e:
        logger.warning("CHAT_CLAIM_FAILED", extra={"sender_id": ctx.sender_id, "kind": e.kind})
        await ctx.reply(f"@{name}, {e.message}")
        return

    card = result.card
    line = f"Congratulations @{name}! You opened your daily pack and got {card.name} ({card.rarity})"
    if result.bonus:
        line += f" and {result.bonus} currency"
    await ctx.reply(line + "!")


async def currency_command(session: AsyncSession, ctx: ChatContext) -> None:
    """!currency: show the sender's balance."""
    user = await get_user(session, ctx.sender_id)
    if user is None:
        await ctx.reply(
            f"{ctx.display_name}, I couldn't find your data. Are you logged in on the website?"
        )
        return
    await ctx.reply(f"{ctx.display_name}, your current currency is {user.currency} ⭐.")


async def cards_command(session: AsyncSession, ctx: ChatContext) -> None:
    """!cards: count the sender's collection."""
    user = await get_user(session, ctx.sender_id)
    if user is None:
        await ctx.reply(NOT_LINKED_MESSAGE.format(name=ctx.display_name))
        return

    cards = await list_user_instances(session, ctx.sender_id)
    unique = len({(card.name, card.type, card.rarity) for card in cards})
    await ctx.reply(f"{ctx.display_name}, you own {len(cards)} cards ({unique} unique).")


COMMANDS: dict[str, ChatCommand] = {
    command.token: command
    for command in (
        ChatCommand("!claim", "Open your daily pack for a random card.", claim_command),
        ChatCommand("!currency", "Show your current currency balance.", currency_command),
        ChatCommand("!cards", "Count the cards in your collection.", cards_command),
    )
}


def parse_command(message: str) -> tuple[str, list[str]] | None:
    """
    Split a chat line into (token, args).

    Returns None when the line is not a known command.
    """
    words = message.strip().split()
    if not words:
        return None
    token = words[0].lower()
    if token not in COMMANDS:
        return None
    return token, words[1:]
