"""
LLM Provider Abstraction.

Meal plans are written by a hosted model. Callers talk to it through one
small interface so the model can be swapped out:
- AnthropicProvider: Real Claude API calls
- NullLLMProvider: Offline stand-in for tests and keyless development
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import settings

logger = logging.getLogger(__name__)


@dataclass
class TextBlock:
    text: str
    type: str = "text"


@dataclass
class NullResponse:
    """Minimal response structure matching the Anthropic message shape."""
    content: List[TextBlock] = field(default_factory=list)
    stop_reason: str = "end_turn"
    model: str = "null-llm"


def response_text(response: Any) -> str:
    """Concatenate the text blocks of a message response."""
    parts = []
    for block in getattr(response, "content", None) or []:
        text = getattr(block, "text", None)
        if text:
            parts.append(text)
    return "".join(parts)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def create_message(
        self,
        model: str,
        max_tokens: int,
        messages: List[Dict[str, Any]],
        system: Optional[str] = None,
        **kwargs
    ) -> Any:
        """Create a message/completion request."""

    @property
    @abstractmethod
    def is_null(self) -> bool:
        """Return True if this is a null/offline provider."""

    def complete(self, prompt: str, model: Optional[str] = None, max_tokens: Optional[int] = None) -> str:
        """Send a single user prompt and return the reply text."""
        response = self.create_message(
            model=model or settings.LLM_MODEL,
            max_tokens=max_tokens or settings.LLM_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
        return response_text(response)


class AnthropicProvider(LLMProvider):
    """Real Anthropic Claude API provider."""

    def __init__(self, api_key: Optional[str] = None):
        from anthropic import Anthropic
        self.api_key = api_key or settings.ANTHROPIC_API_KEY
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY required for AnthropicProvider")
        self.client = Anthropic(api_key=self.api_key)

    def create_message(
        self,
        model: str,
        max_tokens: int,
        messages: List[Dict[str, Any]],
        system: Optional[str] = None,
        **kwargs
    ) -> Any:
        params = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system:
            params["system"] = system
        params.update(kwargs)
        return self.client.messages.create(**params)

    @property
    def is_null(self) -> bool:
        return False


class NullLLMProvider(LLMProvider):
    """
    Offline provider. It does not imitate a model; it records calls and
    returns a fixed text so control flow can be exercised without a key.
    """

    CANNED_TEXT = "[NullLLM: No real LLM call made]"

    def __init__(self):
        self.call_count = 0
        self.last_messages = None
        self.last_model = None
        logger.info("NullLLMProvider initialized - LLM calls will return canned responses")

    def create_message(
        self,
        model: str,
        max_tokens: int,
        messages: List[Dict[str, Any]],
        system: Optional[str] = None,
        **kwargs
    ) -> NullResponse:
        self.call_count += 1
        self.last_messages = messages
        self.last_model = model

        logger.debug(f"NullLLM call #{self.call_count}: model={model}, messages={len(messages)}")

        return NullResponse(content=[TextBlock(text=self.CANNED_TEXT)])

    @property
    def is_null(self) -> bool:
        return True


def get_llm_provider(
    api_key: Optional[str] = None,
    use_null: bool = False
) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        api_key: Optional API key (uses settings if not provided)
        use_null: Force use of NullLLMProvider (for testing)

    Returns:
        LLMProvider instance

    Environment Variables:
        USE_NULL_LLM: Set to "true" to use NullLLMProvider
        ANTHROPIC_API_KEY: API key for AnthropicProvider
    """
    if use_null or settings.USE_NULL_LLM:
        return NullLLMProvider()

    api_key = api_key or settings.ANTHROPIC_API_KEY
    if not api_key:
        logger.warning("No ANTHROPIC_API_KEY found, using NullLLMProvider")
        return NullLLMProvider()

    return AnthropicProvider(api_key=api_key)
