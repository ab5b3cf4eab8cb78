"""Response models shared by the API routers."""

from datetime import datetime

from pydantic import BaseModel, Field

from maelmon.models.card import CardDefinition, CardInstance


class CardResponse(BaseModel):
    """A minted card as shown to its owner."""

    id: int
    name: str
    type: str
    rarity: str
    attack: int
    defense: int
    character_image_url: str
    description: str | None = None
    max_supply: int = Field(..., description="Supply cap at mint time, -1 for unlimited")
    current_supply: int = Field(..., description="Copies minted at mint time")
    owner_id: str | None = None

    @classmethod
    def from_model(cls, card: CardInstance) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            type=card.type,
            rarity=card.rarity,
            attack=card.attack,
            defense=card.defense,
            character_image_url=card.character_image_url,
            description=card.description,
            max_supply=card.max_supply,
            current_supply=card.current_supply,
            owner_id=card.owner_id,
        )


class CardDefinitionResponse(BaseModel):
    """A catalog entry with its live supply."""

    id: int
    name: str
    type: str
    rarity: str
    attack: int
    defense: int
    character_image_url: str
    description: str | None = None
    max_supply: int
    current_supply: int
    remaining_supply: int | None = Field(
        default=None,
        description="Copies left to mint, null when unlimited",
    )
    exhausted: bool = False

    @classmethod
    def from_model(cls, definition: CardDefinition) -> "CardDefinitionResponse":
        return cls(
            id=definition.id,
            name=definition.name,
            type=definition.type,
            rarity=definition.rarity,
            attack=definition.attack,
            defense=definition.defense,
            character_image_url=definition.character_image_url,
            description=definition.description,
            max_supply=definition.max_supply,
            current_supply=definition.current_supply,
            remaining_supply=definition.remaining_supply,
            exhausted=definition.is_exhausted,
        )


class ClaimResponse(BaseModel):
    """Response model for a successful daily pack claim."""

    message: str
    card: CardResponse
    currency: int


class UserResponse(BaseModel):
    """Response model for the logged-in user's profile."""

    is_logged_in: bool = True
    username: str
    display_name: str | None = None
    profile_image_url: str | None = None
    currency: int
    is_admin: bool = False
    last_pack_claimed: datetime | None = None
    cards: list[CardResponse] = Field(default_factory=list)
    card_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Owned copies per card name",
    )


class ProfileSyncRequest(BaseModel):
    """Profile handed over by the OAuth login flow."""

    twitch_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, description="Twitch login name")
    display_name: str | None = None
    profile_image_url: str | None = None
    email: str | None = None


class ProfileSyncResponse(BaseModel):
    """Response model for profile sync."""

    twitch_id: str
    username: str
    currency: int
    created: bool


class AddCardResponse(BaseModel):
    """Response model for the admin add-card operation."""

    message: str
    card: CardDefinitionResponse
    created: bool
