"""
Tests for consult_recommender/config.py.

What we test
------------
  - The shipped config/default.toml loads and matches model defaults.
  - local.toml beside the config file is deep-merged over it.
  - CONSULT_RECOMMENDER_* env vars override file values.
  - Invalid values fail validation; a missing file raises FileNotFoundError.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from consult_recommender.config import AppConfig, ConfidenceConfig, _deep_merge, load_config

_ENV_VARS = (
    "CONSULT_RECOMMENDER_DB_PATH",
    "CONSULT_RECOMMENDER_LOG_LEVEL",
    "CONSULT_RECOMMENDER_DEBUG",
    "CONSULT_RECOMMENDER_EXPERT_SOURCE",
    "CONSULT_RECOMMENDER_EXPERT_API_URL",
    "CONSULT_RECOMMENDER_RANDOM_SEED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_default_file(self):
        config = load_config()
        assert isinstance(config, AppConfig)
        assert config.engine.notification_limit == 3
        assert config.engine.confidence == ConfidenceConfig()
        assert config.providers.expert_source == "static"
        assert config.debug is False

    def test_custom_file(self, tmp_path):
        path = _write(
            tmp_path / "custom.toml",
            """
[project]
debug = true

[engine]
provider_timeout_s = 1.5

[engine.confidence]
strategy_risk = 0.6

[providers]
expert_source = "sqlite"
random_seed = 7
""",
        )
        config = load_config(path)
        assert config.debug is True
        assert config.engine.provider_timeout_s == pytest.approx(1.5)
        assert config.engine.confidence.strategy_risk == pytest.approx(0.6)
        assert config.engine.confidence.expert_industry == pytest.approx(0.85)
        assert config.providers.expert_source == "sqlite"
        assert config.providers.random_seed == 7

    def test_local_toml_merged(self, tmp_path):
        path = _write(tmp_path / "base.toml", "[engine]\nnotification_limit = 5\n")
        _write(tmp_path / "local.toml", "[engine.confidence]\ncontent_industry = 0.5\n")
        config = load_config(path)
        assert config.engine.notification_limit == 5
        assert config.engine.confidence.content_industry == pytest.approx(0.5)

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "c.toml", "[providers]\nexpert_source = \"static\"\n")
        monkeypatch.setenv("CONSULT_RECOMMENDER_EXPERT_SOURCE", "http")
        monkeypatch.setenv("CONSULT_RECOMMENDER_EXPERT_API_URL", "http://dir.test")
        monkeypatch.setenv("CONSULT_RECOMMENDER_RANDOM_SEED", "99")
        monkeypatch.setenv("CONSULT_RECOMMENDER_DB_PATH", "/tmp/x.db")
        monkeypatch.setenv("CONSULT_RECOMMENDER_LOG_LEVEL", "debug")
        monkeypatch.setenv("CONSULT_RECOMMENDER_DEBUG", "yes")

        config = load_config(path)
        assert config.providers.expert_source == "http"
        assert config.providers.expert_api_url == "http://dir.test"
        assert config.providers.random_seed == 99
        assert config.database.db_path == "/tmp/x.db"
        assert config.logging.level == "DEBUG"
        assert config.debug is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    @pytest.mark.parametrize(
        "toml_text",
        [
            "[engine]\nprovider_timeout_s = 0\n",
            "[engine]\nnotification_limit = -1\n",
            "[engine.confidence]\nservice_budget = 1.5\n",
            "[providers]\nexpert_source = \"ldap\"\n",
            "[providers]\nexpert_retention = 2.0\n",
            "[logging]\nlevel = \"LOUD\"\n",
        ],
    )
    def test_invalid_values(self, tmp_path, toml_text):
        path = _write(tmp_path / "bad.toml", toml_text)
        with pytest.raises(ValidationError):
            load_config(path)


class TestDeepMerge:
    def test_nested(self):
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = _deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
        assert base == {"a": {"x": 1, "y": 2}, "b": 1}
