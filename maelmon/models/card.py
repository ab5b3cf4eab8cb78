from dataclasses import dataclass

from maelmon.config import UNLIMITED_SUPPLY


@dataclass(frozen=True, slots=True)
class CardDefinition:
    """
    A card template from the catalog.

    Attributes:
        id: Storage identity of the definition
        name: Card name shown to users
        type: Card type (e.g. "Attack", "Defense", "Support")
        rarity: Rarity label (e.g. "Common", "Legendary"); descriptive only
        attack: Attack value
        defense: Defense value
        character_image_url: Artwork reference
        max_supply: Supply cap, -1 for unlimited
        current_supply: Number of instances minted so far
        description: Optional flavour text
    """

    id: int
    name: str
    type: str
    rarity: str
    attack: int
    defense: int
    character_image_url: str
    max_supply: int
    current_supply: int
    description: str | None = None

    @property
    def is_unlimited(self) -> bool:
        return self.max_supply == UNLIMITED_SUPPLY

    @property
    def is_exhausted(self) -> bool:
        """True when every capped copy has been minted."""
        return not self.is_unlimited and self.current_supply >= self.max_supply

    @property
    def remaining_supply(self) -> int | None:
        """Copies left to mint, or None when unlimited."""
        if self.is_unlimited:
            return None
        return max(self.max_supply - self.current_supply, 0)


@dataclass(frozen=True, slots=True)
class CardInstance:
    """
    A concrete card minted from a definition.

    Supply numbers are the definition's values at mint time.
    owner_id is None only for un-owned template records.
    """

    id: int
    name: str
    type: str
    rarity: str
    attack: int
    defense: int
    character_image_url: str
    max_supply: int
    current_supply: int
    owner_id: str | None
    definition_id: int | None = None
    description: str | None = None
