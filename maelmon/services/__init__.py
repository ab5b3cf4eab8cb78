"""
MaelMon services.

Business logic for daily pack claims, the card catalog and user accounts.
"""

from maelmon.services.accounts import get_account, sync_profile
from maelmon.services.allocation import choose
from maelmon.services.catalog import CatalogUpdate, add_card
from maelmon.services.claims import ClaimResult, claim_daily_pack
from maelmon.services.cooldown import (
    ClaimCooldownTracker,
    CooldownStatus,
    get_cooldown_tracker,
    reset_cooldown_tracker,
)
from maelmon.services.minting import mint

__all__ = [
    "CatalogUpdate",
    "ClaimCooldownTracker",
    "ClaimResult",
    "CooldownStatus",
    "add_card",
    "choose",
    "claim_daily_pack",
    "get_account",
    "get_cooldown_tracker",
    "mint",
    "reset_cooldown_tracker",
    "sync_profile",
]
