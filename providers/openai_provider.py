"""OpenAI provider implementation."""

import logging
import os
from typing import Dict, List, Optional

from .base import LLMProvider, LLMResponse, ModelError

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI models."""

    MODELS = {
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "gpt-4-turbo": "gpt-4-turbo",
        "gpt-4": "gpt-4",
        "o1": "o1",
        "o1-mini": "o1-mini",
    }

    def __init__(self, api_key: Optional[str] = None, client=None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Uses OPENAI_API_KEY env var if not provided.
            client: Pre-built ``openai.OpenAI`` client (tests pass a mock)
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._client = client

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o"

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
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
        import openai

        client = self._get_client()
        resolved_model = self._resolve_model(model)

        full_messages = list(messages)
        if system_prompt:
            full_messages.insert(0, {"role": "system", "content": system_prompt})

        logger.debug("openai request: model=%s messages=%d", resolved_model, len(full_messages))
        try:
            response = client.chat.completions.create(
                model=resolved_model,
                max_tokens=max_tokens,
                messages=full_messages,
            )
        except openai.OpenAIError as e:
            raise ModelError(f"OpenAI request failed: {e}", provider=self.name) from e

        content = response.choices[0].message.content
        if not isinstance(content, str):
            raise ModelError("Unexpected response type: no text content", provider=self.name)

        return LLMResponse(
            content=content,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)
