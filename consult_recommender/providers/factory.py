"""
Provider wiring from ``AppConfig``.

``build_providers(config)`` returns the ``(ExpertDirectory, MarketSignal)``
pair selected by the ``[providers]`` section. When ``random_seed`` is set the
simulated providers share one seeded ``random.Random`` so runs are
reproducible.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from consult_recommender.config import AppConfig
from consult_recommender.providers.base import ExpertDirectory, MarketSignal
from consult_recommender.providers.http_directory import HttpExpertDirectory
from consult_recommender.providers.sqlite_directory import SqliteExpertDirectory
from consult_recommender.providers.static import SimulatedMarketSignal, StaticExpertDirectory

logger = logging.getLogger(__name__)


def build_providers(
    config: AppConfig,
    db_path: Optional[str] = None,
) -> tuple[ExpertDirectory, MarketSignal]:
    """Construct the configured expert directory and market signal.

    Args:
        config: Application config.
        db_path: Override for ``config.database.db_path`` (sqlite source only).

    Returns:
        ``(expert_directory, market_signal)``.

    Raises:
        ValueError: If ``expert_source = "http"`` but no ``expert_api_url`` is set.
    """
    prov = config.providers
    rng = random.Random(prov.random_seed) if prov.random_seed is not None else random.Random()

    directory: ExpertDirectory
    if prov.expert_source == "sqlite":
        directory = SqliteExpertDirectory(
            db_path=db_path or config.database.db_path,
            busy_timeout_ms=config.database.busy_timeout_ms,
        )
    elif prov.expert_source == "http":
        if not prov.expert_api_url:
            raise ValueError("providers.expert_api_url is required when expert_source = 'http'.")
        directory = HttpExpertDirectory(
            base_url=prov.expert_api_url,
            timeout_s=config.engine.provider_timeout_s,
        )
    else:
        directory = StaticExpertDirectory(retention=prov.expert_retention, rng=rng)

    market = SimulatedMarketSignal(
        favorable_threshold=prov.market_favorable_threshold,
        rng=rng,
    )

    logger.debug(
        "Providers built | experts=%s market=%s seed=%s",
        directory.source_name, market.source_name, prov.random_seed,
    )
    return directory, market
