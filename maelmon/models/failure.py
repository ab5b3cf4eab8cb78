"""
Failure classification for card claims and catalog administration.

Every failure the core can produce is a KnownError subclass. Callers at the
transport boundary (HTTP handler, chat command) turn them into a user-facing
message; none of them is allowed to crash the process.

Error taxonomy:
- ValidationError: bad admin input for a card definition
- UnknownUserError: no account for the requesting identity
- CooldownActiveError: daily pack claimed too recently
- NoEligibleCardsError: every definition is exhausted (or none exist)
- SupplyExhaustedError: the chosen definition ran out between selection
  and increment
- StorageError: the database failed; not retried by the core
- NotAuthorizedError: caller lacks the admin flag
"""

import math
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    # Constraint violations
    COOLDOWN_ACTIVE = "cooldown_active"
    SUPPLY_EXHAUSTED = "supply_exhausted"
    FORBIDDEN = "forbidden"

    # Service failures
    STORAGE_UNAVAILABLE = "storage_unavailable"

    # Unknown
    UNKNOWN = "unknown"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a serializable FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ValidationError(KnownError):
    """Raised when a card definition submission is malformed."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=f"field: {field}" if field else None,
            suggestion="Check the card fields and submit again.",
            status_code=400,
        )


class UnknownUserError(KnownError):
    """Raised when no account exists for the requesting identity."""

    def __init__(self, twitch_id: str):
        self.twitch_id = twitch_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message="User not found.",
            detail=f"twitch_id: {twitch_id}",
            suggestion="Log in on the website to link your Twitch account first.",
            status_code=404,
        )


def split_remaining(remaining: timedelta) -> tuple[int, int]:
    """
    Split a remaining wait into whole hours and minutes.

    Minutes are rounded up so a non-zero wait never renders as 0h 0m.
    """
    total_minutes = max(math.ceil(remaining.total_seconds() / 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    return hours, minutes


class CooldownActiveError(KnownError):
    """
    Raised when a user claims their daily pack before the window elapsed.

    Carries the remaining wait both raw and as display-ready hours/minutes.
    """

    def __init__(self, remaining: timedelta):
        self.remaining = remaining
        self.hours, self.minutes = split_remaining(remaining)
        super().__init__(
            kind=FailureKind.COOLDOWN_ACTIVE,
            message=(
                "Daily pack already claimed. "
                f"Please wait {self.hours} hours and {self.minutes} minutes."
            ),
            detail=f"remaining_seconds: {int(remaining.total_seconds())}",
            suggestion="Come back when the cooldown has passed.",
            status_code=400,
        )


class NoEligibleCardsError(KnownError):
    """Raised when no definition has supply left to mint."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message="No cards available to claim.",
            suggestion="All cards are sold out. Try again after a restock.",
            status_code=404,
        )


class SupplyExhaustedError(KnownError):
    """
    Raised when a definition hit its cap between selection and increment.

    The claim did not mint anything and did not consume the cooldown.
    """

    def __init__(self, definition_id: int, name: str):
        self.definition_id = definition_id
        self.name = name
        super().__init__(
            kind=FailureKind.SUPPLY_EXHAUSTED,
            message=f"The last copy of {name} was just claimed by someone else.",
            detail=f"definition_id: {definition_id}",
            suggestion="Claim again to draw a different card.",
            status_code=409,
        )


class StorageError(KnownError):
    """Raised when the database fails. The core never retries these."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            kind=FailureKind.STORAGE_UNAVAILABLE,
            message="Something went wrong on our side. Please try again.",
            detail=f"storage failure during {operation}",
            suggestion="If this persists, please report the issue.",
            status_code=500,
        )


class NotAuthorizedError(KnownError):
    """Raised when a non-admin calls an admin operation."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.FORBIDDEN,
            message="Forbidden: Not an administrator",
            status_code=403,
        )
