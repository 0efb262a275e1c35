"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``CONSULT_RECOMMENDER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The engine, the providers, and every CLI command receive an ``AppConfig``
instance — never raw dicts or individual env var lookups scattered through
the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite database connection settings."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/consult_recommender.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class ConfidenceConfig(BaseModel):
    """Per-rule confidence constants.

    These are configuration, not measured probabilities: each rule emits its
    constant unchanged and the ranker uses it only to break priority ties.
    """

    model_config = ConfigDict(frozen=True)

    expert_industry: float = 0.85
    expert_experience: float = 0.78
    service_pattern: float = 0.82
    service_budget: float = 0.75
    content_industry: float = 0.88
    content_learning: float = 0.80
    timing_seasonal: float = 0.80
    strategy_company_size: float = 0.83
    strategy_risk: float = 0.85

    @field_validator("*")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence constants must be in [0.0, 1.0], got {v}.")
        return v


class EngineConfig(BaseModel):
    """Recommendation engine behaviour."""

    model_config = ConfigDict(frozen=True)

    default_consultation_type: str = "general"
    provider_timeout_s: float = 5.0
    notification_limit: int = 3
    confidence: ConfidenceConfig = ConfidenceConfig()

    @field_validator("provider_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"provider_timeout_s must be positive, got {v}.")
        return v

    @field_validator("notification_limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"notification_limit must be >= 0, got {v}.")
        return v


class ProvidersConfig(BaseModel):
    """Data provider selection for expert lookup and market signals.

    ``expert_source``:
      - ``static``  — built-in placeholder experts, randomly retained.
      - ``sqlite``  — ``experts`` table in the configured database.
      - ``http``    — JSON directory service at ``expert_api_url``.
    """

    model_config = ConfigDict(frozen=True)

    expert_source: Literal["static", "sqlite", "http"] = "static"
    expert_api_url: Optional[str] = None
    expert_retention: float = 0.7
    market_favorable_threshold: float = 0.3
    random_seed: Optional[int] = None

    @field_validator("expert_retention", "market_favorable_threshold")
    @classmethod
    def validate_probability(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"probability must be in [0.0, 1.0], got {v}.")
        return v


class OutputConfig(BaseModel):
    """Filesystem locations for report files."""

    model_config = ConfigDict(frozen=True)

    recommendation_dir: str = "data/outputs/recommendations"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/consult_recommender.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    engine: EngineConfig = EngineConfig()
    providers: ProvidersConfig = ProvidersConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply CONSULT_RECOMMENDER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply CONSULT_RECOMMENDER_* env vars to the raw config dict.

    Supported overrides:
      CONSULT_RECOMMENDER_DB_PATH        → raw["database"]["db_path"]
      CONSULT_RECOMMENDER_LOG_LEVEL      → raw["logging"]["level"]
      CONSULT_RECOMMENDER_DEBUG          → raw["debug"]
      CONSULT_RECOMMENDER_EXPERT_SOURCE  → raw["providers"]["expert_source"]
      CONSULT_RECOMMENDER_EXPERT_API_URL → raw["providers"]["expert_api_url"]
      CONSULT_RECOMMENDER_RANDOM_SEED    → raw["providers"]["random_seed"]
    """
    if db_path := os.environ.get("CONSULT_RECOMMENDER_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if log_level := os.environ.get("CONSULT_RECOMMENDER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("CONSULT_RECOMMENDER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if source := os.environ.get("CONSULT_RECOMMENDER_EXPERT_SOURCE"):
        raw.setdefault("providers", {})["expert_source"] = source

    if api_url := os.environ.get("CONSULT_RECOMMENDER_EXPERT_API_URL"):
        raw.setdefault("providers", {})["expert_api_url"] = api_url

    if seed := os.environ.get("CONSULT_RECOMMENDER_RANDOM_SEED"):
        raw.setdefault("providers", {})["random_seed"] = int(seed)

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    engine_raw = dict(raw.get("engine", {}))
    confidence = ConfidenceConfig(**engine_raw.pop("confidence", {}))

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        engine=EngineConfig(confidence=confidence, **engine_raw),
        providers=ProvidersConfig(**raw.get("providers", {})),
        output=OutputConfig(**raw.get("output", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
