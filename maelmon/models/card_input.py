"""
Validated admin input for creating or restocking a card definition.

Required fields: name, type, rarity, character_image_url.
Optional fields: attack, defense (default 0), max_supply (default -1,
unlimited), description.

Numeric coercion rule (applies to attack, defense and max_supply):
integers are taken as-is, strings are stripped and must parse as a base-10
integer, floats must be integral. Booleans and anything else are rejected.

Both snake_case and the web client's camelCase keys are accepted.
"""

from collections.abc import Mapping
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from maelmon.config import UNLIMITED_SUPPLY
from maelmon.models.failure import ValidationError


class CardDefinitionInput(BaseModel):
    """Admin submission for a card definition."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=50)
    rarity: str = Field(..., min_length=1, max_length=50)
    character_image_url: str = Field(..., min_length=1, alias="characterImageUrl")
    attack: int = 0
    defense: int = 0
    max_supply: int = Field(default=UNLIMITED_SUPPLY, ge=UNLIMITED_SUPPLY, alias="maxSupply")
    description: str | None = None

    @field_validator("attack", "defense", "max_supply", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must be a number")
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError("must be a whole number")
            return int(value)
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text, 10)
            except ValueError:
                raise ValueError("must be a number") from None
        raise ValueError("must be a number")


def parse_card_definition_input(raw: Any) -> CardDefinitionInput:
    """
    Validate a raw request body into a CardDefinitionInput.

    Raises:
        ValidationError: naming the first offending field, or without a
            field when the body is not an object
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Card data must be a JSON object.")

    try:
        return CardDefinitionInput.model_validate(dict(raw))
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        if first["type"] == "missing":
            message = f"Missing required field: {field}"
        else:
            message = f"Invalid value for {field}: {first['msg']}"
        raise ValidationError(message, field=field) from e
