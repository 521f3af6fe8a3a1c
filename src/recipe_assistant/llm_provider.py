"""
Text-generation backends for recipe generation.

Two implementations share the LLMProvider interface:
- AnthropicProvider: Claude Messages API
- NullLLMProvider: canned replies, used in tests and when no API key is set
"""

from abc import ABC, abstractmethod
from typing import Optional, List
import os
import logging

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 2048

NULL_RESPONSE = "[NullLLM: No real LLM call made]"


class LLMProvider(ABC):
    """Single-turn text generation."""

    @abstractmethod
    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Return the model's reply to one user prompt.

        Raises:
            TimeoutError: no reply within timeout seconds
        """

    @property
    @abstractmethod
    def is_null(self) -> bool:
        """True for providers that never call a real model."""


class AnthropicProvider(LLMProvider):
    """Claude via the anthropic SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        import anthropic

        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError("An Anthropic API key is needed (ANTHROPIC_API_KEY)")
        self.client = anthropic.Anthropic(api_key=self.api_key)
        self.model = model
        self.max_tokens = max_tokens

    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        import anthropic

        request = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system
        if timeout is not None:
            request["timeout"] = timeout

        try:
            response = self.client.messages.create(**request)
        except anthropic.APITimeoutError as e:
            raise TimeoutError(f"LLM request timed out after {timeout}s") from e

        return "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )

    @property
    def is_null(self) -> bool:
        return False


class NullLLMProvider(LLMProvider):
    """
    Replays fixed replies instead of calling a model.

    Replies are handed out in order and the last one repeats. The most
    recent prompt and system text are kept for assertions.
    """

    def __init__(self, responses: Optional[List[str]] = None):
        self.responses = list(responses) if responses else [NULL_RESPONSE]
        self.call_count = 0
        self.last_prompt = None
        self.last_system = None
        logger.info(f"NullLLMProvider active ({len(self.responses)} canned replies)")

    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        reply = self.responses[min(self.call_count, len(self.responses) - 1)]
        self.call_count += 1
        self.last_prompt = prompt
        self.last_system = system

        logger.debug(f"NullLLM call #{self.call_count}: prompt={len(prompt)} chars")
        return reply

    @property
    def is_null(self) -> bool:
        return True


def get_llm_provider(
    api_key: Optional[str] = None,
    use_null: bool = False,
    model: str = DEFAULT_MODEL,
) -> LLMProvider:
    """
    Pick the provider for recipe generation.

    NullLLMProvider is used when use_null is set, when USE_NULL_LLM=true,
    or when no API key is given or found in ANTHROPIC_API_KEY.

    Args:
        api_key: Anthropic API key (falls back to the environment)
        use_null: Always return a NullLLMProvider
        model: Claude model id for the real provider
    """
    if use_null or os.environ.get("USE_NULL_LLM", "").lower() == "true":
        return NullLLMProvider()

    api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        logger.warning("ANTHROPIC_API_KEY not set, recipe generation will use NullLLMProvider")
        return NullLLMProvider()

    return AnthropicProvider(api_key=api_key, model=model)
