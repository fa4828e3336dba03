"""LiteLLM-backed provider. One implementation for any model LiteLLM can route."""

import logging
from typing import Dict, List, Optional

from .base import LLMProvider, LLMResponse, ModelError

logger = logging.getLogger(__name__)


# LiteLLM model strings: provider/model-name (OpenAI can omit prefix)
DEFAULT_MODELS = {
    "anthropic": "anthropic/claude-sonnet-4-20250514",
    "openai": "gpt-4o-mini",
}

# Map provider + optional model -> LiteLLM model string
MODEL_ALIASES = {
    "anthropic": {
        None: "anthropic/claude-sonnet-4-20250514",
        "claude-sonnet": "anthropic/claude-sonnet-4-20250514",
        "claude-opus": "anthropic/claude-opus-4-20250514",
        "claude-haiku": "anthropic/claude-3-5-haiku-20241022",
    },
    "openai": {
        None: "gpt-4o-mini",
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "gpt-4-turbo": "gpt-4-turbo",
        "gpt-4": "gpt-4",
        "o1": "o1",
        "o1-mini": "o1-mini",
    },
}


def _to_litellm_model(provider_name: Optional[str], model: Optional[str]) -> str:
    """Map provider + model to LiteLLM model string."""
    if provider_name:
        key = provider_name.lower()
        if key == "claude":
            key = "anthropic"
        elif key == "gpt":
            key = "openai"
        if key in MODEL_ALIASES:
            aliases = MODEL_ALIASES[key]
            if model:
                model_lower = model.lower()
                # Prefer longest alias match first (e.g. gpt-4o-mini before gpt-4o)
                for alias in sorted((a for a in aliases if a), key=len, reverse=True):
                    if model_lower == alias or model_lower.startswith(alias + "-"):
                        return aliases[alias]
                if key == "openai" or "/" in model:
                    return model
                return f"{key}/{model}"
            return aliases[None]
    if model:
        return model
    return DEFAULT_MODELS["anthropic"]


class LiteLLMProvider(LLMProvider):
    """Single provider that delegates to litellm.completion()."""

    def __init__(self, default_model: str, metadata: Optional[dict] = None):
        """Initialize with the LiteLLM model string to use by default.

        Args:
            default_model: LiteLLM model string (e.g. gpt-4o-mini, anthropic/claude-sonnet-4-20250514).
            metadata: Optional dict passed to litellm (e.g. agent name) for its callbacks.
        """
        self._default_model = default_model
        self._metadata = metadata or {}

    @property
    def name(self) -> str:
        return "litellm"

    @property
    def default_model(self) -> str:
        return self._default_model

    def set_metadata(self, metadata: dict) -> None:
        """Merge extra metadata into every subsequent request."""
        self._metadata.update(metadata)

    def complete(
        self,
        system_prompt: Optional[str],
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        import litellm
        import openai

        resolved_model = model or self._default_model
        full_messages = list(messages)
        if system_prompt:
            full_messages.insert(0, {"role": "system", "content": system_prompt})

        logger.debug("litellm request: model=%s messages=%d", resolved_model, len(full_messages))
        try:
            response = litellm.completion(
                model=resolved_model,
                messages=full_messages,
                max_tokens=max_tokens,
                metadata={**self._metadata},
            )
        except openai.OpenAIError as e:
            # litellm's exception types subclass the openai ones
            raise ModelError(f"LiteLLM request failed: {e}", provider=self.name) from e

        content = response.choices[0].message.content
        if not isinstance(content, str):
            raise ModelError("Unexpected response type: no text content", provider=self.name)

        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "prompt_tokens", 0) or 0
        output_tokens = getattr(usage, "completion_tokens", 0) or 0
        hidden = getattr(response, "_hidden_params", None) or {}
        cost = float(hidden.get("response_cost", 0) or 0)
        model_id = getattr(response, "model", None) or resolved_model

        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=model_id,
            provider=self.name,
            cost=cost,
        )

    def is_available(self) -> bool:
        """LiteLLM reads API keys from env; we consider it available if the model is set."""
        return bool(self._default_model)
