"""LLM Provider abstraction for multi-model support."""

from .base import LLMProvider, LLMResponse, ModelError
from .factory import get_provider, list_providers

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "ModelError",
    "get_provider",
    "list_providers",
]
