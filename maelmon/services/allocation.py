"""
Random allocation of a daily pack card.

Selection is uniform over the eligible definitions. Rarity is a label
only and does not weight the draw.
"""

import random
from collections.abc import Sequence
from typing import TypeVar

from maelmon.models.failure import NoEligibleCardsError

T = TypeVar("T")

_default_rng = random.SystemRandom()


def choose(eligible: Sequence[T], rng: random.Random | None = None) -> T:
    """
    Pick one definition with equal probability.

    Args:
        eligible: Definitions that still have supply left
        rng: Random source; a system RNG when omitted

    Raises:
        NoEligibleCardsError: If there is nothing to pick from
    """
    if not eligible:
        raise NoEligibleCardsError()

    index = (rng or _default_rng).randrange(len(eligible))
    return eligible[index]
