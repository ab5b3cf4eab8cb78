"""Tests for daily pack card allocation."""

import random
from collections import Counter

import pytest

from maelmon.models.failure import NoEligibleCardsError
from maelmon.services.allocation import choose


class TestChoose:
    def test_empty_raises(self) -> None:
        with pytest.raises(NoEligibleCardsError):
            choose([])

    def test_single_candidate(self) -> None:
        assert choose(["only"]) == "only"

    def test_seeded_rng_is_deterministic(self) -> None:
        candidates = ["a", "b", "c", "d", "e"]

        first = [choose(candidates, random.Random(7)) for _ in range(5)]
        second = [choose(candidates, random.Random(7)) for _ in range(5)]

        assert first == second

    def test_default_rng_returns_member(self) -> None:
        candidates = ["a", "b", "c"]
        assert choose(candidates) in candidates

    def test_selection_is_roughly_uniform(self) -> None:
        """Each of four candidates lands near a quarter of 8000 draws."""
        candidates = ["common", "uncommon", "rare", "legendary"]
        rng = random.Random(1234)

        counts = Counter(choose(candidates, rng) for _ in range(8000))

        assert set(counts) == set(candidates)
        for count in counts.values():
            assert 1700 < count < 2300

    def test_rarity_does_not_weight_draw(self) -> None:
        """Draws depend on position only, never on the candidate itself."""
        plain = ["x", "y", "z"]
        labelled = [("x", "Common"), ("y", "Legendary"), ("z", "Mythic")]

        picks_plain = [choose(plain, random.Random(seed)) for seed in range(50)]
        picks_labelled = [choose(labelled, random.Random(seed))[0] for seed in range(50)]

        assert picks_plain == picks_labelled
