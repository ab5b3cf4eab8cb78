from dataclasses import dataclass, field
from datetime import UTC, datetime

from maelmon.models.card import CardInstance


@dataclass
class UserAccount:
    """
    A community member and their card collection.

    last_pack_claimed is always timezone-aware (UTC) or None.
    """

    twitch_id: str
    username: str
    currency: int
    display_name: str | None = None
    profile_image_url: str | None = None
    is_admin: bool = False
    last_pack_claimed: datetime | None = None
    cards: list[CardInstance] = field(default_factory=list)

    def card_counts(self) -> dict[str, int]:
        """Number of owned instances per card name."""
        counts: dict[str, int] = {}
        for card in self.cards:
            counts[card.name] = counts.get(card.name, 0) + 1
        return counts

    def total_cards(self) -> int:
        return len(self.cards)


def as_utc(moment: datetime | None) -> datetime | None:
    """
    Attach UTC to timestamps read back without a zone.

    SQLite drops tzinfo on DateTime(timezone=True) columns.
    """
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=UTC)
