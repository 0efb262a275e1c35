"""
Client profile models — the immutable input to the recommendation engine.

``ConsultationRecord`` is a historical fact: one completed (or in-progress)
consultation with its topic tag, outcome, and rating.

``UserProfile`` is assembled by the calling application layer at request
time (see ``consult_recommender.profiles.inference``) and handed to the
engine. The engine never mutates it.

``AccountRecord`` is the thin slice of the web application's user row that
profile inference needs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ConsultationRecord(BaseModel):
    """A single past consultation.

    Attributes:
        id: Consultation identifier from the booking system.
        type: Topic tag used for pattern analysis, e.g. ``"tokenization"``.
        topic: Free-text consultation subject.
        outcome: Outcome label, e.g. ``"successful"`` or ``"in-progress"``.
        rating: Client rating on a 0–5 scale.
        date: When the consultation took place.
        expert_id: Identifier of the consultant who ran it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    topic: str = ""
    outcome: str = ""
    rating: float
    date: datetime
    expert_id: str

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: float) -> float:
        if not 0.0 <= v <= 5.0:
            raise ValueError(f"rating must be in [0, 5], got {v}.")
        return v

    @field_validator("type")
    @classmethod
    def validate_type_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("type must not be empty.")
        return v.strip()


class UserProfile(BaseModel):
    """Everything the engine knows about a client.

    Optional fields are genuinely optional: the engine falls back to default
    buckets when they are missing rather than failing.

    Attributes:
        id: Client user id.
        role: Application role, e.g. ``"CLIENT"``.
        industry: Industry label, e.g. ``"DeFi"``.
        experience: Free-text experience description, e.g. ``"some experience"``.
        consultation_history: Past consultations (oldest first is customary,
            but ordering only matters for tie-breaking the most common topic).
        interests: Interest tags.
        company_size: Company size label (``startup``, ``scale-up``,
            ``enterprise``; anything else falls back to startup).
        budget: Consulting budget in USD.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: str
    industry: Optional[str] = None
    experience: Optional[str] = None
    consultation_history: list[ConsultationRecord] = []
    interests: list[str] = []
    company_size: Optional[str] = None
    budget: Optional[float] = None

    @field_validator("id")
    @classmethod
    def validate_id_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("id must not be empty.")
        return v

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError(f"budget must be non-negative, got {v}.")
        return v


class AccountRecord(BaseModel):
    """Account fields used to infer a ``UserProfile``.

    Attributes:
        id: User id.
        role: Application role.
        email: Account email; drives the industry heuristic.
        name: Display name.
        created_at: Account creation time; drives the experience heuristic.
        subscription_tier: Active plan tier, or ``None`` for no subscription.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: str
    email: str = ""
    name: str = ""
    created_at: datetime
    subscription_tier: Optional[str] = None
