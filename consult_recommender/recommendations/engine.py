"""
RecommendationEngine — map a ``UserProfile`` to ranked ``AIRecommendation``s.

Generators
----------
Each generator is independently callable and returns a (possibly empty)
list; ``generate_all_recommendations`` runs all five concurrently and ranks
the union.

    recommend_experts                  industry match + experience-level match
    recommend_services                 history next-steps + budget tier
    recommend_content                  industry content + learning path
    recommend_timing                   market window + Q4 planning season
    generate_strategic_recommendations company-size strategy + risk mitigation

Ids are ``<slot>-<epoch-millis>``; the stamp is taken once per call, and
every slot is distinct, so ids are unique within one call.

Provider failures
-----------------
Expert and market lookups go through ``_from_provider``: each call is bounded
by ``provider_timeout_s``. A timeout or ``ProviderUnavailableError`` is logged
and the dependent recommendation is omitted; the rest of the batch is
unaffected.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Optional, TypeVar

from consult_recommender.config import AppConfig, ConfidenceConfig
from consult_recommender.models.profile import UserProfile
from consult_recommender.models.recommendation import (
    AIRecommendation,
    ContentMetadata,
    ExpertMetadata,
    ServiceMetadata,
    StrategyMetadata,
    TimingMetadata,
)
from consult_recommender.providers.base import (
    ExpertDirectory,
    MarketSignal,
    ProviderUnavailableError,
)
from consult_recommender.recommendations import rules
from consult_recommender.recommendations.ranker import rank_recommendations
from consult_recommender.taxonomy.recommendation_taxonomy import Priority, RecommendationType
from consult_recommender.utils.time_utils import epoch_millis, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecommendationEngine:
    """Stateless rule engine; collaborators are injected at construction.

    Args:
        expert_directory: Source of experts by industry.
        market_signal: Source of current market conditions.
        confidence: Per-rule confidence constants.
        provider_timeout_s: Upper bound on each provider call.
        default_consultation_type: Used when no consultation type is given.
    """

    def __init__(
        self,
        expert_directory: ExpertDirectory,
        market_signal: MarketSignal,
        confidence: Optional[ConfidenceConfig] = None,
        provider_timeout_s: float = 5.0,
        default_consultation_type: str = "general",
    ) -> None:
        self.expert_directory = expert_directory
        self.market_signal = market_signal
        self.confidence = confidence or ConfidenceConfig()
        self.provider_timeout_s = provider_timeout_s
        self.default_consultation_type = default_consultation_type

    @classmethod
    def from_config(cls, config: AppConfig, db_path: Optional[str] = None) -> "RecommendationEngine":
        """Build an engine with providers selected by ``config.providers``."""
        from consult_recommender.providers.factory import build_providers

        directory, market = build_providers(config, db_path=db_path)
        return cls(
            expert_directory=directory,
            market_signal=market,
            confidence=config.engine.confidence,
            provider_timeout_s=config.engine.provider_timeout_s,
            default_consultation_type=config.engine.default_consultation_type,
        )

    # ── Generators ────────────────────────────────────────────────────────────

    async def recommend_experts(
        self,
        profile: UserProfile,
        consultation_type: str,
        now: Optional[datetime] = None,
    ) -> list[AIRecommendation]:
        now = now or utcnow()
        recs: list[AIRecommendation] = []

        if profile.industry:
            experts = await self._from_provider(
                self.expert_directory.source_name,
                self.expert_directory.by_industry(profile.industry),
            )
            if experts is not None:
                recs.append(
                    AIRecommendation(
                        id=_rec_id("expert-industry", now),
                        type=RecommendationType.EXPERT,
                        title=f"Industry-Specialized Experts for {profile.industry}",
                        description=(
                            f"We found {len(experts)} experts with deep experience "
                            f"in {profile.industry} sector"
                        ),
                        confidence=self.confidence.expert_industry,
                        reasoning=[
                            f"Matched based on your {profile.industry} industry focus",
                            "These experts have 5+ years in your sector",
                            "Average client satisfaction: 4.8/5.0",
                        ],
                        priority=Priority.HIGH,
                        metadata=ExpertMetadata(
                            consultation_type=consultation_type,
                            experts=experts,
                        ),
                    )
                )

        level = rules.determine_experience_level(profile.experience)
        recs.append(
            AIRecommendation(
                id=_rec_id("expert-experience", now),
                type=RecommendationType.EXPERT,
                title=f"{level.value}-Level Consultation Match",
                description=(
                    f"Matched with experts who excel at {level.value.lower()}-level "
                    "blockchain guidance"
                ),
                confidence=self.confidence.expert_experience,
                reasoning=[
                    f"Based on your {profile.experience or 'indicated'} experience level",
                    "Experts selected for clear communication style",
                    "Proven track record with similar clients",
                ],
                priority=Priority.MEDIUM,
                metadata=ExpertMetadata(
                    consultation_type=consultation_type,
                    experience_level=level,
                ),
            )
        )
        return recs

    async def recommend_services(
        self,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> list[AIRecommendation]:
        now = now or utcnow()
        recs: list[AIRecommendation] = []

        if profile.consultation_history:
            patterns = rules.analyze_consultation_patterns(profile.consultation_history)
            recs.append(
                AIRecommendation(
                    id=_rec_id("service-pattern", now),
                    type=RecommendationType.SERVICE,
                    title="Next Logical Step in Your Blockchain Journey",
                    description=rules.describe_next_steps(patterns),
                    confidence=self.confidence.service_pattern,
                    reasoning=[
                        "Based on your consultation history",
                        "Follows logical progression in blockchain adoption",
                        "Addresses common next-step challenges",
                    ],
                    priority=Priority.HIGH,
                    metadata=ServiceMetadata(
                        patterns=patterns,
                        suggested_services=patterns.next_steps,
                    ),
                )
            )

        # A zero budget carries no signal; treat it like an unset one.
        if profile.budget:
            services = rules.budget_optimized_services(profile.budget)
            recs.append(
                AIRecommendation(
                    id=_rec_id("service-budget", now),
                    type=RecommendationType.SERVICE,
                    title="Maximum Value Within Your Budget",
                    description=(
                        "Curated services that deliver the highest impact within your "
                        f"${profile.budget:,.0f} budget"
                    ),
                    confidence=self.confidence.service_budget,
                    reasoning=[
                        f"Optimized for ${profile.budget:,.0f} budget range",
                        "Focus on high-ROI blockchain initiatives",
                        "Structured to show immediate results",
                    ],
                    priority=Priority.MEDIUM,
                    metadata=ServiceMetadata(
                        suggested_services=services,
                        budget=profile.budget,
                    ),
                )
            )
        return recs

    async def recommend_content(
        self,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> list[AIRecommendation]:
        now = now or utcnow()
        recs: list[AIRecommendation] = []

        if profile.industry:
            recs.append(
                AIRecommendation(
                    id=_rec_id("content-industry", now),
                    type=RecommendationType.CONTENT,
                    title=f"{profile.industry} Blockchain Insights",
                    description=(
                        "Curated articles, case studies, and trend reports specific "
                        "to your industry"
                    ),
                    confidence=self.confidence.content_industry,
                    reasoning=[
                        f"Tailored for {profile.industry} sector",
                        "Based on latest industry developments",
                        "Includes peer company case studies",
                    ],
                    priority=Priority.MEDIUM,
                    metadata=ContentMetadata(
                        industry=profile.industry,
                        content_types=list(rules.INDUSTRY_CONTENT_TYPES),
                    ),
                )
            )

        level = rules.determine_experience_level(profile.experience)
        recs.append(
            AIRecommendation(
                id=_rec_id("content-learning", now),
                type=RecommendationType.CONTENT,
                title="Personalized Blockchain Learning Path",
                description=(
                    "Step-by-step educational content matched to your current "
                    "knowledge level"
                ),
                confidence=self.confidence.content_learning,
                reasoning=[
                    "Structured progression from your current level",
                    "Focuses on practical implementation",
                    "Includes real-world examples",
                ],
                priority=Priority.MEDIUM,
                metadata=ContentMetadata(learning_path=rules.learning_path_for(level)),
            )
        )
        return recs

    async def recommend_timing(
        self,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> list[AIRecommendation]:
        now = now or utcnow()
        recs: list[AIRecommendation] = []

        conditions = await self._from_provider(
            self.market_signal.source_name,
            self.market_signal.current(),
        )
        if conditions is not None and conditions.favorable:
            recs.append(
                AIRecommendation(
                    id=_rec_id("timing-market", now),
                    type=RecommendationType.TIMING,
                    title="Optimal Market Window for Blockchain Initiatives",
                    description=conditions.description,
                    confidence=conditions.confidence,
                    reasoning=list(conditions.factors),
                    priority=Priority.HIGH,
                    metadata=TimingMetadata(market_conditions=conditions),
                )
            )

        season = rules.seasonal_window(now.date())
        if season is not None:
            recs.append(
                AIRecommendation(
                    id=_rec_id("timing-seasonal", now),
                    type=RecommendationType.TIMING,
                    title="Q4 Strategic Planning Window",
                    description=(
                        "Ideal time for blockchain strategy planning and budget "
                        "allocation for next year"
                    ),
                    confidence=self.confidence.timing_seasonal,
                    reasoning=[
                        "Q4 is optimal for strategic planning",
                        "Budget cycles align with blockchain initiatives",
                        "Teams have bandwidth for strategic thinking",
                    ],
                    priority=Priority.MEDIUM,
                    metadata=TimingMetadata(season=season),
                )
            )
        return recs

    async def generate_strategic_recommendations(
        self,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> list[AIRecommendation]:
        now = now or utcnow()
        recs: list[AIRecommendation] = []

        if profile.company_size:
            strategy = rules.strategy_for_company_size(profile.company_size)
            recs.append(
                AIRecommendation(
                    id=_rec_id("strategy-size", now),
                    type=RecommendationType.STRATEGY,
                    title=f"Blockchain Strategy for {profile.company_size} Companies",
                    description=strategy.description,
                    confidence=self.confidence.strategy_company_size,
                    reasoning=list(strategy.reasoning),
                    priority=Priority.HIGH,
                    metadata=StrategyMetadata(strategy=strategy),
                )
            )

        recs.append(
            AIRecommendation(
                id=_rec_id("strategy-risk", now),
                type=RecommendationType.STRATEGY,
                title="Risk Mitigation Strategy",
                description=(
                    "Identified potential risks and recommended mitigation strategies "
                    "for your blockchain adoption"
                ),
                confidence=self.confidence.strategy_risk,
                reasoning=[
                    "Based on common risks in your industry/size category",
                    "Includes preventive measures",
                    "Provides contingency planning guidance",
                ],
                priority=Priority.HIGH,
                metadata=StrategyMetadata(
                    risk_assessment=rules.BLOCKCHAIN_RISKS.model_copy(deep=True)
                ),
            )
        )
        return recs

    # ── Aggregation ───────────────────────────────────────────────────────────

    async def generate_all_recommendations(
        self,
        profile: UserProfile,
        consultation_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> list[AIRecommendation]:
        """Run every generator concurrently and return the ranked union.

        Args:
            profile: Client profile.
            consultation_type: Optional hint carried into expert metadata.
            now: Reference time for ids and seasonal rules (default: UTC now).

        Returns:
            Recommendations ordered by priority, then confidence.
        """
        now = now or utcnow()
        batches = await asyncio.gather(
            self.recommend_experts(
                profile, consultation_type or self.default_consultation_type, now=now
            ),
            self.recommend_services(profile, now=now),
            self.recommend_content(profile, now=now),
            self.recommend_timing(profile, now=now),
            self.generate_strategic_recommendations(profile, now=now),
        )
        flat = [rec for batch in batches for rec in batch]
        ranked = rank_recommendations(flat)
        logger.info(
            "Generated %d recommendations | user=%s", len(ranked), profile.id
        )
        return ranked

    # ── Helpers ───────────────────────────────────────────────────────────────

    async def _from_provider(self, source: str, call: Awaitable[T]) -> Optional[T]:
        """Await a provider call; ``None`` if it times out or is unavailable."""
        try:
            return await asyncio.wait_for(call, timeout=self.provider_timeout_s)
        except ProviderUnavailableError as exc:
            logger.warning("Provider %s unavailable, omitting: %s", source, exc.reason)
        except TimeoutError:
            logger.warning(
                "Provider %s timed out after %.1fs, omitting", source, self.provider_timeout_s
            )
        return None


def _rec_id(slot: str, now: datetime) -> str:
    return f"{slot}-{epoch_millis(now)}"
