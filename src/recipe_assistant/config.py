"""Application configuration.

Loads settings from environment variables (and a local .env file) with
sensible defaults.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .llm_provider import DEFAULT_MODEL
from .price_estimator import BATCH_DELAY, BATCH_SIZE, DEFAULT_CURRENCY
from .recipe_generator import LLM_TIMEOUT


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class AppConfig:
    """Recipe Assistant configuration."""

    db_dir: str = "data"
    anthropic_api_key: Optional[str] = None
    use_null_llm: bool = False
    llm_model: str = DEFAULT_MODEL
    llm_timeout: float = LLM_TIMEOUT
    price_currency: str = DEFAULT_CURRENCY
    price_batch_size: int = BATCH_SIZE
    price_batch_delay: float = BATCH_DELAY
    http_timeout: float = 10.0
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AppConfig":
        """Load configuration from environment variables."""
        if load_env_file:
            load_dotenv()

        return cls(
            db_dir=os.getenv("RECIPE_DB_DIR", "data"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            use_null_llm=_env_bool("USE_NULL_LLM"),
            llm_model=os.getenv("LLM_MODEL", DEFAULT_MODEL),
            llm_timeout=float(os.getenv("LLM_TIMEOUT", str(LLM_TIMEOUT))),
            price_currency=os.getenv("PRICE_CURRENCY", DEFAULT_CURRENCY).upper(),
            price_batch_size=int(os.getenv("PRICE_BATCH_SIZE", str(BATCH_SIZE))),
            price_batch_delay=float(os.getenv("PRICE_BATCH_DELAY", str(BATCH_DELAY))),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "10.0")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            debug=_env_bool("DEBUG"),
        )
