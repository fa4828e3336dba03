"""Anthropic (Claude) provider implementation."""

import logging
import os
from typing import Dict, List, Optional

from .base import LLMProvider, LLMResponse, ModelError

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """Provider for Anthropic Claude models."""

    MODELS = {
        "claude-sonnet": "claude-sonnet-4-20250514",
        "claude-opus": "claude-opus-4-20250514",
        "claude-haiku": "claude-3-5-haiku-20241022",
        "sonnet": "claude-sonnet-4-20250514",
        "opus": "claude-opus-4-20250514",
        "haiku": "claude-3-5-haiku-20241022",
    }

    def __init__(self, api_key: Optional[str] = None, client=None):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key. Uses ANTHROPIC_API_KEY env var if not provided.
            client: Pre-built ``anthropic.Anthropic`` client (tests pass a mock)
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client = client

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    def _get_client(self):
        if self._client is None:
            from anthropic import Anthropic
            self._client = Anthropic(api_key=self.api_key)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
        """Resolve model alias to full model name."""
        if model is None:
            return self.default_model
        return self.MODELS.get(model, model)

    def complete(
        self,
        system_prompt: Optional[str],
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        import anthropic

        client = self._get_client()
        resolved_model = self._resolve_model(model)

        kwargs = {
            "model": resolved_model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        logger.debug("anthropic request: model=%s messages=%d", resolved_model, len(messages))
        try:
            response = client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise ModelError(f"Anthropic request failed: {e}", provider=self.name) from e

        if not response.content:
            raise ModelError("Anthropic returned an empty response", provider=self.name)
        block = response.content[0]
        if block.type != "text":
            raise ModelError(f"Unexpected response type: {block.type}", provider=self.name)

        return LLMResponse(
            content=block.text,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)
