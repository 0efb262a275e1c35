"""
Data provider interfaces consumed by the recommendation engine.

The engine never generates its own data: expert availability and market
conditions come from injected providers so tests can substitute
deterministic fakes and deployments can swap in live sources without
touching the ranking logic.

Contract for every provider:
  - Methods are ``async`` (real implementations do I/O).
  - "Data source unavailable" is signalled by raising
    ``ProviderUnavailableError``; the engine then omits the dependent
    recommendation instead of failing the batch.
  - Any other exception is a bug and propagates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from consult_recommender.models.recommendation import Expert, MarketConditions


class ProviderUnavailableError(RuntimeError):
    """A data provider could not answer (network, database, bad payload)."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider} unavailable: {reason}")
        self.provider = provider
        self.reason = reason


class ExpertDirectory(ABC):
    """Lookup of consultants by industry."""

    source_name: str = "expert_directory"

    @abstractmethod
    async def by_industry(self, industry: str) -> list[Expert]:
        """Return experts matching ``industry`` (possibly empty).

        Raises:
            ProviderUnavailableError: If the backing source cannot be reached.
        """
        ...


class MarketSignal(ABC):
    """Source of current market conditions for timing recommendations."""

    source_name: str = "market_signal"

    @abstractmethod
    async def current(self) -> MarketConditions:
        """Return the current market conditions.

        Raises:
            ProviderUnavailableError: If the backing source cannot be reached.
        """
        ...
