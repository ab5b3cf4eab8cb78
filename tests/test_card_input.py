"""Tests for admin card definition input validation."""

import pytest

from maelmon.models.card_input import CardDefinitionInput, parse_card_definition_input
from maelmon.models.failure import FailureKind, ValidationError


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": "Maelstrom",
        "type": "Attack",
        "rarity": "Legendary",
        "characterImageUrl": "https://img.example/maelstrom.png",
    }
    payload.update(overrides)
    return payload


class TestRequiredFields:
    def test_minimal_payload_gets_defaults(self) -> None:
        data = parse_card_definition_input(_payload())

        assert data.name == "Maelstrom"
        assert data.attack == 0
        assert data.defense == 0
        assert data.max_supply == -1
        assert data.description is None

    @pytest.mark.parametrize("field", ["name", "type", "rarity", "characterImageUrl"])
    def test_missing_required_field(self, field: str) -> None:
        payload = _payload()
        del payload[field]

        with pytest.raises(ValidationError) as exc_info:
            parse_card_definition_input(payload)

        assert exc_info.value.field == field
        assert exc_info.value.kind == FailureKind.INVALID_INPUT
        assert "Missing required field" in exc_info.value.message

    @pytest.mark.parametrize("raw", [[_payload()], "Maelstrom", 3, None])
    def test_non_object_rejected(self, raw: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_card_definition_input(raw)

        assert exc_info.value.field is None
        assert exc_info.value.message == "Card data must be a JSON object."

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_card_definition_input(_payload(name="   "))

    def test_snake_case_keys_accepted(self) -> None:
        payload = _payload()
        payload["character_image_url"] = payload.pop("characterImageUrl")
        payload["max_supply"] = 3

        data = parse_card_definition_input(payload)

        assert data.character_image_url == "https://img.example/maelstrom.png"
        assert data.max_supply == 3


class TestNumericCoercion:
    def test_numeric_strings_coerced(self) -> None:
        data = parse_card_definition_input(_payload(attack="7", defense=" 4 ", maxSupply="10"))

        assert data.attack == 7
        assert data.defense == 4
        assert data.max_supply == 10

    def test_integral_float_coerced(self) -> None:
        data = parse_card_definition_input(_payload(attack=5.0))
        assert data.attack == 5

    @pytest.mark.parametrize("value", ["abc", "", 2.5, True, None, [1]])
    def test_non_numeric_attack_rejected(self, value: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_card_definition_input(_payload(attack=value))

        assert exc_info.value.field == "attack"

    def test_max_supply_below_sentinel_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_card_definition_input(_payload(maxSupply=-2))

        assert exc_info.value.field == "maxSupply"

    def test_zero_max_supply_allowed(self) -> None:
        data = parse_card_definition_input(_payload(maxSupply=0))
        assert data.max_supply == 0

    def test_model_is_frozen(self) -> None:
        data = CardDefinitionInput.model_validate(_payload())
        with pytest.raises(Exception):
            data.attack = 3  # type: ignore[misc]
