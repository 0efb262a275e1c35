"""
Tests for consult_recommender/providers/static.py.

What we test
------------
StaticExpertDirectory:
  - retention=1.0 keeps every expert; retention=0.0 keeps none.
  - Same seed -> same subset.
  - retention outside [0, 1] raises ValueError.
  - Returned experts are copies; editing them leaves the roster intact.

SimulatedMarketSignal:
  - Confidence always within [0.75, 0.95].
  - threshold=1.0 -> never favorable.
  - Same seed -> same conditions.

FixedMarketSignal:
  - favorable() / unfavorable() return their preset conditions.
  - Each call returns a fresh copy of the conditions.
"""

from __future__ import annotations

import asyncio
import random

import pytest

from consult_recommender.providers.static import (
    MARKET_FACTORS,
    SAMPLE_EXPERTS,
    FixedMarketSignal,
    SimulatedMarketSignal,
    StaticExpertDirectory,
)


class TestStaticExpertDirectory:
    def test_full_retention(self) -> None:
        directory = StaticExpertDirectory(retention=1.0)
        experts = asyncio.run(directory.by_industry("DeFi"))
        assert [e.id for e in experts] == ["1", "2", "3"]

    def test_zero_retention(self) -> None:
        directory = StaticExpertDirectory(retention=0.0)
        assert asyncio.run(directory.by_industry("DeFi")) == []

    def test_returned_experts_are_independent_of_roster(self) -> None:
        directory = StaticExpertDirectory(retention=1.0)
        first = asyncio.run(directory.by_industry("DeFi"))
        first[0].industries.append("Edited")
        second = asyncio.run(directory.by_industry("DeFi"))
        assert "Edited" not in second[0].industries
        assert "Edited" not in SAMPLE_EXPERTS[0].industries

    def test_seeded_subset_is_reproducible(self) -> None:
        first = StaticExpertDirectory(rng=random.Random(3))
        second = StaticExpertDirectory(rng=random.Random(3))
        for _ in range(5):
            a = asyncio.run(first.by_industry("Gaming"))
            b = asyncio.run(second.by_industry("Gaming"))
            assert a == b

    def test_subset_of_roster(self) -> None:
        directory = StaticExpertDirectory(rng=random.Random(11))
        ids = {e.id for e in SAMPLE_EXPERTS}
        for _ in range(20):
            assert {e.id for e in asyncio.run(directory.by_industry("x"))} <= ids

    @pytest.mark.parametrize("retention", [-0.1, 1.5])
    def test_invalid_retention(self, retention) -> None:
        with pytest.raises(ValueError, match="retention"):
            StaticExpertDirectory(retention=retention)


class TestSimulatedMarketSignal:
    def test_confidence_range(self) -> None:
        signal = SimulatedMarketSignal(rng=random.Random(5))
        for _ in range(50):
            conditions = asyncio.run(signal.current())
            assert 0.75 <= conditions.confidence <= 0.95
            assert conditions.factors == list(MARKET_FACTORS)

    def test_threshold_one_never_favorable(self) -> None:
        signal = SimulatedMarketSignal(favorable_threshold=1.0, rng=random.Random(9))
        assert not any(asyncio.run(signal.current()).favorable for _ in range(30))

    def test_seeded_is_reproducible(self) -> None:
        a = asyncio.run(SimulatedMarketSignal(rng=random.Random(42)).current())
        b = asyncio.run(SimulatedMarketSignal(rng=random.Random(42)).current())
        assert a == b


class TestFixedMarketSignal:
    def test_favorable(self) -> None:
        conditions = asyncio.run(FixedMarketSignal.favorable(confidence=0.9).current())
        assert conditions.favorable is True
        assert conditions.confidence == pytest.approx(0.9)

    def test_unfavorable(self) -> None:
        conditions = asyncio.run(FixedMarketSignal.unfavorable().current())
        assert conditions.favorable is False

    def test_conditions_are_copied_per_call(self) -> None:
        signal = FixedMarketSignal.favorable()
        asyncio.run(signal.current()).factors.append("Edited")
        assert asyncio.run(signal.current()).factors == list(MARKET_FACTORS)
