"""
Recommendation taxonomy: the closed vocabularies shared by the engine,
the models, the notification mapper, and the feedback store.

  - ``RecommendationType`` — the *what*: which kind of suggestion is this?
  - ``Priority``           — the *how urgent*: ranking bucket.
  - ``ExperienceLevel``    — the client's blockchain maturity.
  - ``CompanySize``        — strategy bucket for the client organisation.
  - ``SubscriptionTier``   — billing tier used for profile inference.
  - ``FeedbackAction``     — what the client did with a recommendation.

``PRIORITY_RANK`` is the canonical ordering contract used by the ranker:
higher rank sorts first.

This module has NO imports from any other ``consult_recommender`` package.
"""

from enum import StrEnum


class RecommendationType(StrEnum):
    """Category of suggestion produced by the engine."""

    EXPERT = "expert"
    """Match with one or more consultants."""

    SERVICE = "service"
    """Upsell or next-step consulting service."""

    CONTENT = "content"
    """Articles, case studies, learning paths."""

    TIMING = "timing"
    """When to act: market windows and planning seasons."""

    STRATEGY = "strategy"
    """Organisation-level strategy and risk guidance."""


class Priority(StrEnum):
    """Ranking bucket for a recommendation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 4,
    Priority.HIGH:   3,
    Priority.MEDIUM: 2,
    Priority.LOW:    1,
}


class ExperienceLevel(StrEnum):
    """Client blockchain maturity, derived from the free-text experience field."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class CompanySize(StrEnum):
    """Organisation size bucket used to pick a strategy template."""

    STARTUP = "startup"
    SCALE_UP = "scale-up"
    ENTERPRISE = "enterprise"


class SubscriptionTier(StrEnum):
    """Billing plan tier, used when inferring company size and budget."""

    BASIC = "basic"
    PREMIUM = "premium"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class FeedbackAction(StrEnum):
    """Client response to a delivered recommendation."""

    ACCEPTED = "accepted"
    DISMISSED = "dismissed"
    COMPLETED = "completed"
