"""
Claim Cooldown Tracker: Daily Pack Rate Limiting.

Per-user state machine:

    Ready --claim--> (mint) --stamp--> OnCooldown --window elapsed--> Ready

INVARIANTS:
- The check runs BEFORE any supply mutation
- The stamp is written only AFTER a mint succeeded, so a failed claim
  never consumes the user's window
- A claim is Ready exactly when now - last_pack_claimed >= window

SERIALIZATION:
Two claims from the same identity (web and chat racing) could both pass
the check before either stamps. When enabled, `serialize` hands out one
asyncio.Lock per Twitch id so the check-to-stamp sequence runs one claim
at a time within this process. Separate processes are not coordinated.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol
from weakref import WeakValueDictionary

from maelmon.config import settings
from maelmon.models.failure import CooldownActiveError
from maelmon.models.user import as_utc

logger = logging.getLogger(__name__)


class ClaimHistory(Protocol):
    """Anything that records when its owner last claimed a pack."""

    last_pack_claimed: datetime | None


@dataclass(frozen=True, slots=True)
class CooldownStatus:
    """Result of a cooldown check."""

    ready: bool
    remaining: timedelta = timedelta(0)


READY = CooldownStatus(ready=True)


@dataclass
class ClaimCooldownTracker:
    """
    Evaluates the daily pack window and serializes claims per user.

    Holds no claim timestamps itself; those live on the user record.
    """

    window: timedelta = field(
        default_factory=lambda: timedelta(hours=settings.daily_pack_cooldown_hours)
    )
    serialize_per_user: bool = field(default_factory=lambda: settings.serialize_claims_per_user)

    _locks: WeakValueDictionary[str, asyncio.Lock] = field(
        default_factory=WeakValueDictionary, repr=False
    )

    def check_and_reserve(self, user: ClaimHistory, now: datetime) -> CooldownStatus:
        """
        Report whether the user may claim at `now`.

        A never-claimed user is always Ready. A last claim in the future
        (clock skew) counts as just claimed.
        """
        last = as_utc(user.last_pack_claimed)
        if last is None:
            return READY

        elapsed = now - last
        if elapsed >= self.window:
            return READY

        remaining = self.window - max(elapsed, timedelta(0))
        return CooldownStatus(ready=False, remaining=remaining)

    def ensure_ready(self, user: ClaimHistory, now: datetime) -> None:
        """
        Raise if the user is still on cooldown.

        Raises:
            CooldownActiveError: With the remaining wait
        """
        status = self.check_and_reserve(user, now)
        if not status.ready:
            raise CooldownActiveError(status.remaining)

    @asynccontextmanager
    async def serialize(self, twitch_id: str) -> AsyncIterator[None]:
        """Hold the per-user claim lock for the duration of the block."""
        if not self.serialize_per_user:
            yield
            return

        lock = self._locks.get(twitch_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[twitch_id] = lock

        if lock.locked():
            logger.info("CLAIM_WAITING_FOR_USER_LOCK", extra={"twitch_id": twitch_id})

        async with lock:
            yield


# Singleton tracker instance
_cooldown_tracker: ClaimCooldownTracker | None = None


def get_cooldown_tracker() -> ClaimCooldownTracker:
    """Get the global cooldown tracker instance."""
    global _cooldown_tracker
    if _cooldown_tracker is None:
        _cooldown_tracker = ClaimCooldownTracker()
    return _cooldown_tracker


def reset_cooldown_tracker() -> None:
    """Reset the global cooldown tracker (for testing)."""
    global _cooldown_tracker
    _cooldown_tracker = None
