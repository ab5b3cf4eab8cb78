from maelmon.models.card import CardDefinition, CardInstance
from maelmon.models.card_input import CardDefinitionInput, parse_card_definition_input
from maelmon.models.failure import (
    CooldownActiveError,
    FailureDetail,
    FailureKind,
    KnownError,
    NoEligibleCardsError,
    NotAuthorizedError,
    StorageError,
    SupplyExhaustedError,
    UnknownUserError,
    ValidationError,
    split_remaining,
)
from maelmon.models.user import UserAccount

__all__ = [
    "CardDefinition",
    "CardDefinitionInput",
    "CardInstance",
    "CooldownActiveError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "NoEligibleCardsError",
    "NotAuthorizedError",
    "StorageError",
    "SupplyExhaustedError",
    "UnknownUserError",
    "UserAccount",
    "ValidationError",
    "parse_card_definition_input",
    "split_remaining",
]
