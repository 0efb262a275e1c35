"""
Rule tables and pure heuristics behind every recommendation.

Everything here is deterministic and side-effect free: lookups over
module-level constants, each with a default bucket so no input — however
sparse — raises.

Experience level decision table (ordered; first match wins)
-----------------------------------------------------------
    experience text contains "expert" or "advanced"      -> Advanced
    experience text contains "intermediate" or "some"    -> Intermediate
    anything else, or no experience given                -> Beginner

Budget tiers (USD)
------------------
    budget <  5,000   -> entry services
    budget < 15,000   -> mid-tier services
    otherwise         -> full engagement services

Company size strategies
-----------------------
    startup | scale-up | enterprise (case-insensitive); unknown -> startup
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Optional

from consult_recommender.models.profile import ConsultationRecord
from consult_recommender.models.recommendation import (
    CompanyStrategy,
    ConsultationPatterns,
    RiskAssessment,
)
from consult_recommender.taxonomy.recommendation_taxonomy import CompanySize, ExperienceLevel
from consult_recommender.utils.time_utils import is_q4

# ── Experience ────────────────────────────────────────────────────────────────

EXPERIENCE_RULES: tuple[tuple[tuple[str, ...], ExperienceLevel], ...] = (
    (("expert", "advanced"), ExperienceLevel.ADVANCED),
    (("intermediate", "some"), ExperienceLevel.INTERMEDIATE),
)

DEFAULT_EXPERIENCE_LEVEL = ExperienceLevel.BEGINNER


def determine_experience_level(experience: Optional[str]) -> ExperienceLevel:
    """Map free-text experience to an ``ExperienceLevel`` via ``EXPERIENCE_RULES``."""
    if not experience:
        return DEFAULT_EXPERIENCE_LEVEL
    text = experience.lower()
    for keywords, level in EXPERIENCE_RULES:
        if any(k in text for k in keywords):
            return level
    return DEFAULT_EXPERIENCE_LEVEL


LEARNING_PATHS: dict[ExperienceLevel, tuple[str, ...]] = {
    ExperienceLevel.BEGINNER: (
        "Blockchain Fundamentals",
        "Cryptocurrency Basics",
        "Smart Contract Introduction",
        "Use Case Analysis",
    ),
    ExperienceLevel.INTERMEDIATE: (
        "Advanced Smart Contracts",
        "DeFi Protocols",
        "Security Best Practices",
        "Scalability Solutions",
    ),
    ExperienceLevel.ADVANCED: (
        "Protocol Design",
        "Economic Models",
        "Governance Structures",
        "Innovation Strategies",
    ),
}


def learning_path_for(level: ExperienceLevel) -> list[str]:
    return list(LEARNING_PATHS.get(level, LEARNING_PATHS[DEFAULT_EXPERIENCE_LEVEL]))


# ── Consultation history ──────────────────────────────────────────────────────

NEXT_STEPS_BY_TOPIC: dict[str, tuple[str, ...]] = {
    "tokenization": ("Smart Contract Development", "Token Economics Design", "Regulatory Compliance"),
    "defi":         ("Liquidity Strategy", "Risk Management", "Protocol Governance"),
    "nft":          ("Marketplace Integration", "Royalty Systems", "Community Building"),
    "enterprise":   ("Blockchain Integration", "Change Management", "Performance Optimization"),
}

DEFAULT_NEXT_STEPS: tuple[str, ...] = (
    "Strategic Planning",
    "Technical Architecture",
    "Implementation Roadmap",
)


def next_steps_for_topic(topic: Optional[str]) -> list[str]:
    """Return the follow-up services for a consultation topic tag."""
    if not topic:
        return list(DEFAULT_NEXT_STEPS)
    return list(NEXT_STEPS_BY_TOPIC.get(topic.strip().lower(), DEFAULT_NEXT_STEPS))


def analyze_consultation_patterns(history: list[ConsultationRecord]) -> ConsultationPatterns:
    """Summarise a non-empty consultation history.

    The most common topic is the most frequent ``type``; ties go to the
    topic seen first.

    Raises:
        ValueError: If ``history`` is empty.
    """
    if not history:
        raise ValueError("history must contain at least one consultation.")

    counts = Counter(record.type for record in history)
    most_common_topic = counts.most_common(1)[0][0]
    average_rating = sum(record.rating for record in history) / len(history)

    return ConsultationPatterns(
        total_consultations=len(history),
        most_common_topic=most_common_topic,
        average_rating=round(average_rating, 2),
        next_steps=next_steps_for_topic(most_common_topic),
    )


def describe_next_steps(patterns: ConsultationPatterns) -> str:
    first, second = (patterns.next_steps + ["", ""])[:2]
    return (
        f"Based on your focus on {patterns.most_common_topic}, we recommend "
        f"advancing to {first} and {second} consultations."
    )


# ── Budget ────────────────────────────────────────────────────────────────────

BUDGET_TIERS: tuple[tuple[float, tuple[str, ...]], ...] = (
    (5_000.0,  ("Strategy Session", "Initial Assessment", "Roadmap Planning")),
    (15_000.0, ("Comprehensive Audit", "Implementation Planning", "Team Training")),
)

TOP_BUDGET_SERVICES: tuple[str, ...] = (
    "Full Implementation",
    "Ongoing Support",
    "Custom Development",
)


def budget_optimized_services(budget: float) -> list[str]:
    for ceiling, services in BUDGET_TIERS:
        if budget < ceiling:
            return list(services)
    return list(TOP_BUDGET_SERVICES)


# ── Content ───────────────────────────────────────────────────────────────────

INDUSTRY_CONTENT_TYPES: tuple[str, ...] = ("articles", "case-studies", "reports", "webinars")


# ── Seasonality ───────────────────────────────────────────────────────────────

Q4_SEASON = "Q4-planning"


def seasonal_window(check_date: date) -> Optional[str]:
    """Return the active planning season label, or ``None``."""
    return Q4_SEASON if is_q4(check_date) else None


# ── Strategy ──────────────────────────────────────────────────────────────────

COMPANY_SIZE_STRATEGIES: dict[CompanySize, CompanyStrategy] = {
    CompanySize.STARTUP: CompanyStrategy(
        description="Lean blockchain approach focusing on MVP and rapid validation",
        reasoning=[
            "Prioritize speed to market over complexity",
            "Focus on core value propositions",
            "Leverage existing blockchain infrastructure",
        ],
    ),
    CompanySize.ENTERPRISE: CompanyStrategy(
        description="Comprehensive blockchain transformation with phased implementation",
        reasoning=[
            "Structured approach to minimize disruption",
            "Integration with existing enterprise systems",
            "Change management and training programs",
        ],
    ),
    CompanySize.SCALE_UP: CompanyStrategy(
        description="Strategic blockchain integration to support rapid growth",
        reasoning=[
            "Scalable architecture from the start",
            "Balance innovation with operational stability",
            "Prepare for enterprise-level requirements",
        ],
    ),
}


def strategy_for_company_size(company_size: Optional[str]) -> CompanyStrategy:
    key = (company_size or "").strip().lower()
    try:
        size = CompanySize(key)
    except ValueError:
        size = CompanySize.STARTUP
    return COMPANY_SIZE_STRATEGIES[size].model_copy(deep=True)


BLOCKCHAIN_RISKS = RiskAssessment(
    technical_risks=[
        "Smart contract vulnerabilities",
        "Scalability limitations",
        "Integration challenges",
    ],
    regulatory_risks=[
        "Compliance requirements",
        "Changing regulations",
        "Cross-border implications",
    ],
    business_risks=[
        "Market adoption rates",
        "Technology maturity",
        "Competitive responses",
    ],
    mitigation_strategies=[
        "Comprehensive security audits",
        "Regulatory compliance framework",
        "Phased implementation approach",
        "Continuous monitoring and updates",
    ],
)
