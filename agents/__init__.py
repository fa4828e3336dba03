"""Agent implementations for Autonoma.

Each agent owns one kind of model call in the project lifecycle.
"""

from .base_agent import (
    BaseAgent,
    TokenUsage,
    GenerationError,
    extract_json_block,
    parse_json_block,
)
from .intake_agent import IntakeAgent
from .charter_agent import CharterAgent
from .update_agent import UpdateAgent
from .escalation_agent import EscalationAgent

__all__ = [
    # Base
    "BaseAgent",
    "TokenUsage",
    "GenerationError",
    "extract_json_block",
    "parse_json_block",
    # Specialized agents
    "IntakeAgent",
    "CharterAgent",
    "UpdateAgent",
    "EscalationAgent",
]
