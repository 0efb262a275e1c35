"""
In-process providers: placeholder experts and simulated market signals.

``StaticExpertDirectory`` serves a fixed roster and keeps each expert with
probability ``retention`` — a stand-in for real matching that still varies
between calls. Its roster is not industry-specific.

``SimulatedMarketSignal`` reports favorable conditions with probability
``1 - favorable_threshold`` and a confidence drawn from [0.75, 0.95).

Both take an explicit ``random.Random`` so callers (and tests) control the
sequence; ``FixedMarketSignal`` removes randomness entirely.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from consult_recommender.models.recommendation import Expert, MarketConditions
from consult_recommender.providers.base import ExpertDirectory, MarketSignal

logger = logging.getLogger(__name__)

SAMPLE_EXPERTS: tuple[Expert, ...] = (
    Expert(
        id="1",
        name="Dr. Sarah Chen",
        specialization="DeFi Protocol Architecture",
        rating=4.9,
        industries=["DeFi", "Finance", "Cryptocurrency"],
    ),
    Expert(
        id="2",
        name="Michael Rodriguez",
        specialization="Enterprise Blockchain Integration",
        rating=4.8,
        industries=["Technology", "Enterprise", "Real Estate"],
    ),
    Expert(
        id="3",
        name="Elena Kowalski",
        specialization="Smart Contract Auditing",
        rating=4.9,
        industries=["DeFi", "Gaming", "Technology"],
    ),
)

MARKET_DESCRIPTION = (
    "Current market conditions show increased enterprise blockchain adoption, "
    "making this an optimal time for strategic consultation."
)

MARKET_FACTORS: tuple[str, ...] = (
    "Increased institutional adoption rates",
    "Favorable regulatory developments",
    "Growing enterprise demand for blockchain solutions",
)


class StaticExpertDirectory(ExpertDirectory):
    """Fixed expert roster filtered by a random retention test."""

    source_name = "static_experts"

    def __init__(
        self,
        experts: tuple[Expert, ...] | list[Expert] = SAMPLE_EXPERTS,
        retention: float = 0.7,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= retention <= 1.0:
            raise ValueError(f"retention must be in [0.0, 1.0], got {retention}.")
        self._experts = tuple(experts)
        self._retention = retention
        self._rng = rng or random.Random()

    async def by_industry(self, industry: str) -> list[Expert]:
        kept = [
            e.model_copy(deep=True)
            for e in self._experts
            if self._rng.random() < self._retention
        ]
        logger.debug(
            "Static directory | industry=%s kept=%d/%d",
            industry, len(kept), len(self._experts),
        )
        return kept


class SimulatedMarketSignal(MarketSignal):
    """Randomised market conditions."""

    source_name = "simulated_market"

    def __init__(
        self,
        favorable_threshold: float = 0.3,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._threshold = favorable_threshold
        self._rng = rng or random.Random()

    async def current(self) -> MarketConditions:
        favorable = self._rng.random() > self._threshold
        confidence = 0.75 + self._rng.random() * 0.2
        return MarketConditions(
            favorable=favorable,
            confidence=round(confidence, 4),
            description=MARKET_DESCRIPTION,
            factors=list(MARKET_FACTORS),
        )


class FixedMarketSignal(MarketSignal):
    """Always returns the same conditions."""

    source_name = "fixed_market"

    def __init__(self, conditions: MarketConditions) -> None:
        self._conditions = conditions

    @classmethod
    def favorable(cls, confidence: float = 0.85) -> "FixedMarketSignal":
        return cls(
            MarketConditions(
                favorable=True,
                confidence=confidence,
                description=MARKET_DESCRIPTION,
                factors=list(MARKET_FACTORS),
            )
        )

    @classmethod
    def unfavorable(cls) -> "FixedMarketSignal":
        return cls(
            MarketConditions(
                favorable=False,
                confidence=0.75,
                description=MARKET_DESCRIPTION,
                factors=list(MARKET_FACTORS),
            )
        )

    async def current(self) -> MarketConditions:
        return self._conditions.model_copy(deep=True)
