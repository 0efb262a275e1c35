"""
Shared pytest fixtures for the consult-recommender test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the full
    schema applied. Created anew for each test that requests it.
  - Sample profiles (fully populated and minimal).
  - Reference timestamps inside and outside the Q4 planning window.
  - Deterministic fake providers, including failing and slow directories,
    and a ``make_engine`` factory wiring them into a ``RecommendationEngine``.
"""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import datetime, timezone
from typing import Callable, Generator, Optional

import pytest

from consult_recommender.db.schema import apply_schema
from consult_recommender.models.profile import ConsultationRecord, UserProfile
from consult_recommender.models.recommendation import Expert
from consult_recommender.providers.base import ExpertDirectory, ProviderUnavailableError
from consult_recommender.providers.static import SAMPLE_EXPERTS, FixedMarketSignal
from consult_recommender.recommendations.engine import RecommendationEngine


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the full schema applied.

    Foreign key enforcement is ON. Schema is applied idempotently.
    Connection is closed after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Reference times ───────────────────────────────────────────────────────────

@pytest.fixture
def q4_now() -> datetime:
    """Mid-November: inside the Q4 planning window."""
    return datetime(2024, 11, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def summer_now() -> datetime:
    """Mid-June: outside the Q4 planning window."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


# ── Sample domain object factories ────────────────────────────────────────────

def _consultation(
    cid: str,
    ctype: str,
    rating: float = 5.0,
    day: int = 1,
) -> ConsultationRecord:
    return ConsultationRecord(
        id=cid,
        type=ctype,
        topic=f"{ctype} session",
        outcome="successful",
        rating=rating,
        date=datetime(2024, 5, day, tzinfo=timezone.utc),
        expert_id="expert1",
    )


@pytest.fixture
def full_profile() -> UserProfile:
    """Every optional field populated; history dominated by tokenization."""
    return UserProfile(
        id="user-full",
        role="CLIENT",
        industry="DeFi",
        experience="some experience",
        consultation_history=[
            _consultation("c1", "tokenization", 5.0, 1),
            _consultation("c2", "defi", 4.0, 2),
            _consultation("c3", "tokenization", 4.5, 3),
        ],
        interests=["blockchain", "defi"],
        company_size="enterprise",
        budget=12_000.0,
    )


@pytest.fixture
def minimal_profile() -> UserProfile:
    """Only the required fields."""
    return UserProfile(id="user-min", role="CLIENT")


# ── Fake providers ────────────────────────────────────────────────────────────

class FakeExpertDirectory(ExpertDirectory):
    source_name = "fake_experts"

    def __init__(self, experts: Optional[list[Expert]] = None) -> None:
        self.experts = list(SAMPLE_EXPERTS) if experts is None else experts
        self.calls: list[str] = []

    async def by_industry(self, industry: str) -> list[Expert]:
        self.calls.append(industry)
        return list(self.experts)


class FailingExpertDirectory(ExpertDirectory):
    source_name = "failing_experts"

    async def by_industry(self, industry: str) -> list[Expert]:
        raise ProviderUnavailableError(self.source_name, "connection refused")


class SlowExpertDirectory(ExpertDirectory):
    source_name = "slow_experts"

    def __init__(self, delay_s: float = 1.0) -> None:
        self.delay_s = delay_s

    async def by_industry(self, industry: str) -> list[Expert]:
        await asyncio.sleep(self.delay_s)
        return list(SAMPLE_EXPERTS)


class BrokenExpertDirectory(ExpertDirectory):
    source_name = "broken_experts"

    async def by_industry(self, industry: str) -> list[Expert]:
        raise KeyError("bug in directory")


@pytest.fixture
def fake_directory() -> FakeExpertDirectory:
    return FakeExpertDirectory()


@pytest.fixture
def failing_directory() -> FailingExpertDirectory:
    return FailingExpertDirectory()


@pytest.fixture
def slow_directory() -> SlowExpertDirectory:
    return SlowExpertDirectory(delay_s=1.0)


@pytest.fixture
def broken_directory() -> BrokenExpertDirectory:
    return BrokenExpertDirectory()


@pytest.fixture
def make_engine() -> Callable[..., RecommendationEngine]:
    """Factory: ``make_engine(directory=None, favorable=True, timeout_s=5.0)``."""

    def _make(
        directory: Optional[ExpertDirectory] = None,
        favorable: bool = True,
        market_confidence: float = 0.85,
        timeout_s: float = 5.0,
    ) -> RecommendationEngine:
        market = (
            FixedMarketSignal.favorable(confidence=market_confidence)
            if favorable
            else FixedMarketSignal.unfavorable()
        )
        return RecommendationEngine(
            expert_directory=directory or FakeExpertDirectory(),
            market_signal=market,
            provider_timeout_s=timeout_s,
        )

    return _make
