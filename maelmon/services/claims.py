"""
Daily Pack Claim Orchestrator.

The single entry point used by both the web API and the chat bot to redeem
a user's daily pack.

Steps, in order:
1. Load the user account                     -> UnknownUserError
2. Check the cooldown window                 -> CooldownActiveError
3. List definitions with supply left
4. Pick one uniformly at random              -> NoEligibleCardsError
5. Increment its supply (conditional UPDATE) -> SupplyExhaustedError
6. Mint an instance owned by the user
7. Credit the configured currency bonus (may be 0)
8. Stamp last_pack_claimed and commit
9. Return the minted card and the new balance

INVARIANTS:
- Nothing is written before step 5
- The cooldown is stamped only after a successful mint
- A lost supply race mints nothing and is not retried here; retrying
  is the caller's decision
- Storage failures roll back the whole claim and surface as StorageError
"""

import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from maelmon.config import settings
from maelmon.db.operations import (
    credit_currency,
    get_user,
    increment_supply,
    instance_to_model,
    list_eligible_definitions,
    stamp_pack_claimed,
)
from maelmon.models.card import CardInstance
from maelmon.models.failure import (
    CooldownActiveError,
    NoEligibleCardsError,
    StorageError,
    SupplyExhaustedError,
    UnknownUserError,
)
from maelmon.models.user import as_utc
from maelmon.services.allocation import choose
from maelmon.services.cooldown import ClaimCooldownTracker, get_cooldown_tracker
from maelmon.services.minting import mint

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClaimResult:
    """Outcome of a successful daily pack claim."""

    card: CardInstance
    new_currency: int
    bonus: int
    claimed_at: datetime


async def claim_daily_pack(
    session: AsyncSession,
    twitch_id: str,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
    tracker: ClaimCooldownTracker | None = None,
    currency_bonus: int | None = None,
) -> ClaimResult:
    """
    Redeem the daily pack for one user.

    Args:
        session: Unit of work; committed by this function on success
        twitch_id: External identity of the claiming user
        now: Claim time, naive values taken as UTC; read after the
            per-user lock when omitted
        rng: Random source for the card draw
        tracker: Cooldown tracker; the process-wide one when omitted
        currency_bonus: Overrides settings.daily_pack_currency_bonus

    Raises:
        UnknownUserError, CooldownActiveError, NoEligibleCardsError,
        SupplyExhaustedError, StorageError
    """
    tracker = tracker or get_cooldown_tracker()
    bonus = settings.daily_pack_currency_bonus if currency_bonus is None else currency_bonus

    async with tracker.serialize(twitch_id):
        claim_time = as_utc(now) or datetime.now(UTC)
        try:
            return await _run_claim(session, twitch_id, claim_time, rng, tracker, bonus)
        except SQLAlchemyError as e:
            logger.exception("CLAIM_STORAGE_FAILURE", extra={"twitch_id": twitch_id})
            await session.rollback()
            raise StorageError("claim_daily_pack") from e


async def _run_claim(
    session: AsyncSession,
    twitch_id: str,
    now: datetime,
    rng: random.Random | None,
    tracker: ClaimCooldownTracker,
    bonus: int,
) -> ClaimResult:
    user = await get_user(session, twitch_id)
    if user is None:
        logger.info("CLAIM_UNKNOWN_USER", extra={"twitch_id": twitch_id})
        raise UnknownUserError(twitch_id)

    try:
        tracker.ensure_ready(user, now)
    except CooldownActiveError as e:
        logger.info(
            "CLAIM_ON_COOLDOWN",
            extra={"twitch_id": twitch_id, "remaining_seconds": int(e.remaining.total_seconds())},
        )
        raise

    eligible = await list_eligible_definitions(session)
    try:
        chosen = choose(eligible, rng)
    except NoEligibleCardsError:
        logger.warning("CLAIM_NO_ELIGIBLE_CARDS", extra={"twitch_id": twitch_id})
        raise

    try:
        await increment_supply(session, chosen)
    except SupplyExhaustedError:
        logger.warning(
            "SUPPLY_EXHAUSTED",
            extra={"twitch_id": twitch_id, "definition_id": chosen.id},
        )
        raise

    instance = await mint(session, chosen, user.twitch_id)

    new_currency = user.currency
    if bonus:
        new_currency = await credit_currency(session, user, bonus)

    await stamp_pack_claimed(session, user, now)
    await session.commit()

    logger.info(
        "DAILY_PACK_CLAIMED",
        extra={
            "twitch_id": twitch_id,
            "definition_id": chosen.id,
            "instance_id": instance.id,
            "supply": f"{chosen.current_supply}/{chosen.max_supply}",
            "bonus": bonus,
        },
    )

    return ClaimResult(
        card=instance_to_model(instance),
        new_currency=new_currency,
        bonus=bonus,
        claimed_at=now,
    )
