"""
Recommendation and notification output models.

``AIRecommendation`` is a single typed suggestion produced by the engine.
Its ``metadata`` is a discriminated union keyed by ``kind``; the validator
enforces that ``metadata.kind`` matches the recommendation ``type`` so each
variant's shape is known statically.

``Notification`` is the dashboard-facing projection of a top recommendation.

Supporting value objects (``Expert``, ``MarketConditions``,
``ConsultationPatterns``, ``CompanyStrategy``, ``RiskAssessment``) are shared
with the data providers and the rule tables.

All models are frozen — recommendations are produced per request and
discarded after rendering.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from consult_recommender.taxonomy.recommendation_taxonomy import (
    ExperienceLevel,
    Priority,
    RecommendationType,
)


# ── Value objects ─────────────────────────────────────────────────────────────


class Expert(BaseModel):
    """A consultant as returned by an ``ExpertDirectory``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    specialization: str
    rating: float
    industries: list[str] = []

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: float) -> float:
        if not 0.0 <= v <= 5.0:
            raise ValueError(f"rating must be in [0, 5], got {v}.")
        return v


class MarketConditions(BaseModel):
    """Snapshot from a ``MarketSignal``."""

    model_config = ConfigDict(frozen=True)

    favorable: bool
    confidence: float
    description: str
    factors: list[str]

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {v}.")
        return v


class ConsultationPatterns(BaseModel):
    """Summary of a client's consultation history."""

    model_config = ConfigDict(frozen=True)

    total_consultations: int
    most_common_topic: str
    average_rating: float
    next_steps: list[str]


class CompanyStrategy(BaseModel):
    """Strategy template for a company size bucket."""

    model_config = ConfigDict(frozen=True)

    description: str
    reasoning: list[str]


class RiskAssessment(BaseModel):
    """Static blockchain adoption risk categories and mitigations."""

    model_config = ConfigDict(frozen=True)

    technical_risks: list[str]
    regulatory_risks: list[str]
    business_risks: list[str]
    mitigation_strategies: list[str]


# ── Metadata variants ─────────────────────────────────────────────────────────


class ExpertMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["expert"] = "expert"
    consultation_type: str
    experts: Optional[list[Expert]] = None
    experience_level: Optional[ExperienceLevel] = None


class ServiceMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["service"] = "service"
    patterns: Optional[ConsultationPatterns] = None
    suggested_services: list[str]
    budget: Optional[float] = None


class ContentMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["content"] = "content"
    industry: Optional[str] = None
    content_types: list[str] = []
    learning_path: list[str] = []


class TimingMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["timing"] = "timing"
    market_conditions: Optional[MarketConditions] = None
    season: Optional[str] = None


class StrategyMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["strategy"] = "strategy"
    strategy: Optional[CompanyStrategy] = None
    risk_assessment: Optional[RiskAssessment] = None


RecommendationMetadata = Annotated[
    Union[ExpertMetadata, ServiceMetadata, ContentMetadata, TimingMetadata, StrategyMetadata],
    Field(discriminator="kind"),
]


# ── Outputs ───────────────────────────────────────────────────────────────────


class AIRecommendation(BaseModel):
    """One ranked suggestion for a client.

    Attributes:
        id: ``<slot>-<epoch-millis>``; unique within one generation call.
        type: Recommendation category.
        title: Short headline.
        description: One-sentence explanation.
        confidence: Configured confidence constant in [0, 1].
        reasoning: Ordered supporting statements.
        actionable: Whether the dashboard should render a call to action.
        priority: Ranking bucket.
        metadata: Type-specific payload; ``metadata.kind`` must equal ``type``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: RecommendationType
    title: str
    description: str
    confidence: float
    reasoning: list[str]
    actionable: bool = True
    priority: Priority
    metadata: Optional[RecommendationMetadata] = None

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {v}.")
        return v

    @model_validator(mode="after")
    def validate_metadata_kind(self) -> "AIRecommendation":
        if self.metadata is not None and self.metadata.kind != self.type.value:
            raise ValueError(
                f"metadata kind '{self.metadata.kind}' does not match "
                f"recommendation type '{self.type.value}'."
            )
        return self


class Notification(BaseModel):
    """Dashboard notification derived from a top recommendation."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    message: str
    type: Literal["recommendation"] = "recommendation"
    priority: Priority
    action_url: str
    timestamp: datetime
