"""
Profile inference: build a ``UserProfile`` from thin account data.

The web application does not store industry, experience, company size or
budget for a user, so these are inferred from what it does store.

Heuristics
----------
industry        ordered substring rules on the email address; default Technology
experience      consultation count or account age:
                    >= 10 consultations or > 365 days old -> Advanced
                    >=  3 consultations or >  90 days old -> Intermediate
                    otherwise                              -> Beginner
company_size    subscription tier: enterprise/professional -> enterprise,
                premium -> scale-up, anything else -> startup
budget          subscription tier: enterprise 50k, professional 20k,
                premium 10k, anything else 5k (USD)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from consult_recommender.models.profile import AccountRecord, ConsultationRecord, UserProfile
from consult_recommender.taxonomy.recommendation_taxonomy import (
    CompanySize,
    ExperienceLevel,
    SubscriptionTier,
)
from consult_recommender.utils.time_utils import days_between, utcnow

logger = logging.getLogger(__name__)

# ── Industry ──────────────────────────────────────────────────────────────────

# Ordered; first match wins ("fintech" must be checked before "tech").
INDUSTRY_EMAIL_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("fintech", "finance"), "Finance"),
    (("tech", "startup"), "Technology"),
    (("crypto", "blockchain"), "Cryptocurrency"),
    (("gaming",), "Gaming"),
    (("real-estate", "property"), "Real Estate"),
)

DEFAULT_INDUSTRY = "Technology"

DEFAULT_INTERESTS: tuple[str, ...] = ("blockchain", "defi", "tokenization")


def infer_industry(email: str, name: str = "") -> str:
    """Guess an industry label from the account email.

    ``name`` is accepted for future heuristics but currently unused.
    """
    text = (email or "").lower()
    for keywords, industry in INDUSTRY_EMAIL_RULES:
        if any(k in text for k in keywords):
            return industry
    return DEFAULT_INDUSTRY


# ── Experience ────────────────────────────────────────────────────────────────

ADVANCED_MIN_CONSULTATIONS = 10
ADVANCED_MIN_ACCOUNT_DAYS = 365
INTERMEDIATE_MIN_CONSULTATIONS = 3
INTERMEDIATE_MIN_ACCOUNT_DAYS = 90


def infer_experience(
    consultation_count: int,
    created_at: datetime,
    now: Optional[datetime] = None,
) -> str:
    """Return an experience label ("Beginner" | "Intermediate" | "Advanced")."""
    account_age_days = days_between(created_at, now or utcnow())

    if (
        consultation_count >= ADVANCED_MIN_CONSULTATIONS
        or account_age_days > ADVANCED_MIN_ACCOUNT_DAYS
    ):
        return ExperienceLevel.ADVANCED.value
    if (
        consultation_count >= INTERMEDIATE_MIN_CONSULTATIONS
        or account_age_days > INTERMEDIATE_MIN_ACCOUNT_DAYS
    ):
        return ExperienceLevel.INTERMEDIATE.value
    return ExperienceLevel.BEGINNER.value


# ── Subscription tier ─────────────────────────────────────────────────────────

TIER_COMPANY_SIZE: dict[SubscriptionTier, CompanySize] = {
    SubscriptionTier.ENTERPRISE:   CompanySize.ENTERPRISE,
    SubscriptionTier.PROFESSIONAL: CompanySize.ENTERPRISE,
    SubscriptionTier.PREMIUM:      CompanySize.SCALE_UP,
}

TIER_BUDGET_USD: dict[SubscriptionTier, float] = {
    SubscriptionTier.ENTERPRISE:   50_000.0,
    SubscriptionTier.PROFESSIONAL: 20_000.0,
    SubscriptionTier.PREMIUM:      10_000.0,
}

DEFAULT_BUDGET_USD = 5_000.0


def _parse_tier(tier: Optional[str]) -> SubscriptionTier:
    try:
        return SubscriptionTier((tier or "").strip().lower())
    except ValueError:
        return SubscriptionTier.BASIC


def infer_company_size(tier: Optional[str]) -> str:
    return TIER_COMPANY_SIZE.get(_parse_tier(tier), CompanySize.STARTUP).value


def infer_budget(tier: Optional[str]) -> float:
    return TIER_BUDGET_USD.get(_parse_tier(tier), DEFAULT_BUDGET_USD)


# ── Composition ───────────────────────────────────────────────────────────────


def build_user_profile(
    account: AccountRecord,
    history: Optional[list[ConsultationRecord]] = None,
    interests: Optional[list[str]] = None,
    now: Optional[datetime] = None,
) -> UserProfile:
    """Assemble a ``UserProfile`` from an account plus its consultation history.

    Args:
        account: Account row.
        history: Past consultations (default: none).
        interests: Interest tags (default: ``DEFAULT_INTERESTS``).
        now: Reference time for the account-age heuristic.

    Returns:
        A fully populated ``UserProfile``.
    """
    history = history or []
    profile = UserProfile(
        id=account.id,
        role=account.role,
        industry=infer_industry(account.email, account.name),
        experience=infer_experience(len(history), account.created_at, now=now),
        consultation_history=history,
        interests=list(interests) if interests is not None else list(DEFAULT_INTERESTS),
        company_size=infer_company_size(account.subscription_tier),
        budget=infer_budget(account.subscription_tier),
    )
    logger.debug(
        "Inferred profile | user=%s industry=%s experience=%s size=%s",
        profile.id, profile.industry, profile.experience, profile.company_size,
    )
    return profile
