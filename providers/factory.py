"""Factory for creating LLM providers."""

from typing import Optional, Dict, Type

from config import settings
from .base import LLMProvider
from .anthropic_provider import AnthropicProvider
from .openai_provider import OpenAIProvider
from .litellm_provider import LiteLLMProvider, _to_litellm_model


# Registry of SDK-backed providers
PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "claude": AnthropicProvider,
    "openai": OpenAIProvider,
    "gpt": OpenAIProvider,
}

# Model to provider mapping for auto-detection
MODEL_PROVIDERS: Dict[str, str] = {
    # Anthropic
    "claude": "anthropic",
    "sonnet": "anthropic",
    "opus": "anthropic",
    "haiku": "anthropic",
    # OpenAI
    "gpt-": "openai",
    "o1": "openai",
}


def get_provider(
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
) -> LLMProvider:
    """Get an LLM provider instance.

    Args:
        provider_name: Explicit provider name (anthropic, openai, litellm)
        model: Model name - if provided without provider, will auto-detect provider

    Returns:
        LLMProvider instance

    Examples:
        get_provider("anthropic")
        get_provider("litellm", model="gpt-4o-mini")
        get_provider(model="gpt-4o")  # Returns OpenAI provider
        get_provider()  # Anthropic
    """
    if provider_name:
        provider_key = provider_name.lower()
        if provider_key == "litellm":
            return LiteLLMProvider(default_model=_to_litellm_model(None, model))
        if provider_key not in PROVIDERS:
            raise ValueError(
                f"Unknown provider: {provider_name}. "
                f"Available: {list(PROVIDERS.keys()) + ['litellm']}"
            )
        return _build(PROVIDERS[provider_key])

    # Try to detect from model name
    if model:
        model_lower = model.lower()
        for prefix, provider in MODEL_PROVIDERS.items():
            if model_lower.startswith(prefix):
                return _build(PROVIDERS[provider])
        # Anything else goes through LiteLLM (e.g. gemini/gemini-2.0-flash)
        return LiteLLMProvider(default_model=model)

    return get_provider(provider_name=settings.default_provider or "anthropic")


def _build(provider_class: Type[LLMProvider]) -> LLMProvider:
    """Instantiate an SDK-backed provider with the key from settings, if any."""
    if provider_class is AnthropicProvider:
        return AnthropicProvider(api_key=settings.anthropic_api_key or None)
    if provider_class is OpenAIProvider:
        return OpenAIProvider(api_key=settings.openai_api_key or None)
    return provider_class()


def list_providers() -> Dict[str, bool]:
    """List all providers and their availability.

    Returns:
        Dict mapping provider name to availability status
    """
    result = {}
    for name, provider_class in PROVIDERS.items():
        # Skip aliases
        if name in ["claude", "gpt"]:
            continue
        result[name] = _build(provider_class).is_available()
    result["litellm"] = LiteLLMProvider(default_model=_to_litellm_model(None, None)).is_available()
    return result
