"""
Unit tests for config.py
"""

import pytest

from recipe_assistant.config import AppConfig
from recipe_assistant.llm_provider import DEFAULT_MODEL

ENV_VARS = [
    "RECIPE_DB_DIR", "ANTHROPIC_API_KEY", "USE_NULL_LLM", "LLM_MODEL", "LLM_TIMEOUT",
    "PRICE_CURRENCY", "PRICE_BATCH_SIZE", "PRICE_BATCH_DELAY", "HTTP_TIMEOUT",
    "API_HOST", "API_PORT", "DEBUG",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAppConfig:
    """Test loading configuration from the environment."""

    def test_defaults(self, clean_env):
        config = AppConfig.from_env(load_env_file=False)

        assert config.db_dir == "data"
        assert config.anthropic_api_key is None
        assert config.use_null_llm is False
        assert config.llm_model == DEFAULT_MODEL
        assert config.llm_timeout == 25.0
        assert config.price_currency == "GBP"
        assert config.price_batch_size == 3
        assert config.price_batch_delay == 0.5
        assert config.port == 8000
        assert config.debug is False

    def test_overrides(self, clean_env):
        clean_env.setenv("RECIPE_DB_DIR", "/tmp/recipes")
        clean_env.setenv("USE_NULL_LLM", "1")
        clean_env.setenv("PRICE_CURRENCY", "eur")
        clean_env.setenv("PRICE_BATCH_SIZE", "5")
        clean_env.setenv("PRICE_BATCH_DELAY", "0")
        clean_env.setenv("API_PORT", "9000")
        clean_env.setenv("DEBUG", "TRUE")

        config = AppConfig.from_env(load_env_file=False)

        assert config.db_dir == "/tmp/recipes"
        assert config.use_null_llm is True
        assert config.price_currency == "EUR"
        assert config.price_batch_size == 5
        assert config.price_batch_delay == 0.0
        assert config.port == 9000
        assert config.debug is True

    def test_empty_api_key_is_none(self, clean_env):
        clean_env.setenv("ANTHROPIC_API_KEY", "")

        assert AppConfig.from_env(load_env_file=False).anthropic_api_key is None
