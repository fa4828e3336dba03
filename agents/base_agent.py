"""Base agent class that all Autonoma agents inherit from.

Every agent:
- Holds an explicitly injected LLM provider (no module-level client)
- Calls the model with a system prompt plus a message list
- Pulls the JSON object out of the model's free-text reply
- Tracks token usage across calls
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from providers import get_provider, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)

# Greedy on purpose: first "{" through last "}" so commentary around the block is ignored
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class GenerationError(Exception):
    """The model replied, but not with a usable JSON document."""

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


def extract_json_block(text: str) -> Optional[str]:
    """Return the substring from the first ``{`` to the last ``}``, or None."""
    match = _JSON_BLOCK.search(text)
    return match.group(0) if match else None


def parse_json_block(text: str) -> Dict[str, Any]:
    """Extract and decode the JSON object embedded in ``text``.

    Raises:
        GenerationError: If there is no brace-delimited block or it does not decode
            to a JSON object
    """
    block = extract_json_block(text)
    if block is None:
        raise GenerationError("No JSON object found in model response", raw_response=text)
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Malformed JSON in model response: {e}", raw_response=text) from e
    if not isinstance(data, dict):
        raise GenerationError("Model response JSON is not an object", raw_response=text)
    return data


class TokenUsage(BaseModel):
    """Running token usage for an agent."""
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0

    def add(self, response: LLMResponse) -> None:
        self.input_tokens += response.input_tokens
        self.output_tokens += response.output_tokens
        self.cost_usd += response.cost


class BaseAgent(ABC):
    """Base class for all Autonoma agents."""

    def __init__(
        self,
        role: str,
        llm_provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        """Initialize the agent.

        Args:
            role: Agent role, used in logs and provider metadata
            llm_provider: Ready-made provider; takes precedence over ``provider``/``model``
            model: Override the provider's default model
            provider: Explicit provider name (anthropic, openai, litellm) when no
                      ``llm_provider`` is given
        """
        self.role = role
        self.llm_provider: LLMProvider = llm_provider or get_provider(provider_name=provider, model=model)
        self.model = model or self.llm_provider.default_model
        if hasattr(self.llm_provider, "set_metadata"):
            self.llm_provider.set_metadata({"agent": self.role})

        self.total_usage = TokenUsage()

    def _call_model(
        self,
        system_prompt: Optional[str],
        messages: List[Dict[str, str]],
        max_tokens: int,
    ) -> str:
        """Make one completion request and return its text.

        ModelError from the provider propagates unchanged; there are no retries.
        """
        logger.debug("%s: calling %s (%s)", self.role, self.llm_provider.name, self.model)
        response = self.llm_provider.complete(
            system_prompt=system_prompt,
            messages=messages,
            model=self.model,
            max_tokens=max_tokens,
        )
        self.total_usage.add(response)
        return response.content

    @abstractmethod
    def get_task_description(self) -> str:
        """Return a description of what this agent does.

        Used for logging and debugging.
        """
        pass
