"""Intake Agent - the conversational project definition dialogue.

Each user turn is one model call. The model sees the whole conversation plus
the data extracted so far and answers with a JSON envelope carrying its reply,
updated fields and the next phase. A reply that is not parseable JSON never
breaks the conversation: the raw text is shown and the state is left as is.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from agents.base_agent import BaseAgent, GenerationError, parse_json_block
from config import settings
from contracts import (
    ConversationContext,
    ConversationPhase,
    IntakeTurnResult,
)
from providers import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.7
DEGRADED_CONFIDENCE = 0.5


class IntakeAgent(BaseAgent):
    """Turns unstructured chat into ProjectIntakeData, one turn at a time."""

    SYSTEM_PROMPT = """You are Autonoma, an autonomous project intelligence system that helps organizations initiate, plan, and manage projects. You are a professional, experienced project manager AI.

Your responsibilities:
1. Help users define projects through natural conversation
2. Extract key project parameters (objectives, constraints, stakeholders, timeline)
3. Ask clarifying questions when information is incomplete
4. Generate comprehensive project charters
5. Provide project management guidance

Communication style:
- Professional but approachable
- Concise and clear
- Ask one clarifying question at a time
- Summarize what you've understood before asking for more

Always extract and track these project parameters during intake:
- Project name and description
- Primary objective and success criteria
- Key stakeholders and their roles
- Timeline expectations
- Known constraints (budget, resources, dependencies)
- Team size and composition"""

    TURN_TEMPLATE = """Current extracted project data:
{extracted_data}

Current phase: {phase}

User message: "{user_message}"

Instructions:
1. Update the extracted project data based on the user's message
2. Determine what information is still missing
3. If key information is missing, ask ONE clarifying question
4. If all essential information is gathered (name, objective, success criteria, timeline, stakeholders), move to confirmation phase
5. In confirmation phase, summarize the project and ask for approval

Use these keys in extractedData: name, description, objective, success_criteria (list), key_stakeholders (list), constraints (list), target_timeline, budget_range, team_size (integer), dependencies (list).

Respond in JSON format:
{{
  "response": "Your conversational response to the user",
  "extractedData": {{ updated project data }},
  "phase": "intake" | "clarification" | "confirmation" | "complete",
  "confidence": 0.0-1.0,
  "missingFields": ["list of missing important fields"]
}}"""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        """Initialize the Intake Agent."""
        super().__init__(
            role="intake",
            llm_provider=llm_provider,
            model=model,
            provider=provider,
        )

    def get_task_description(self) -> str:
        return "Extract structured project intake data from a conversation"

    def build_messages(self, user_message: str, context: ConversationContext) -> List[Dict[str, str]]:
        """Prior history followed by the synthesized instruction turn."""
        turn = self.TURN_TEMPLATE.format(
            extracted_data=json.dumps(context.extracted_data.model_dump(exclude_unset=True, warnings=False), indent=2),
            phase=context.phase.value,
            user_message=user_message,
        )
        history = [{"role": m.role.value, "content": m.content} for m in context.messages]
        return [*history, {"role": "user", "content": turn}]

    def advance(self, user_message: str, context: ConversationContext) -> IntakeTurnResult:
        """Process one user message.

        Args:
            user_message: The user's latest message (non-empty; caller-enforced)
            context: Conversation so far

        Returns:
            IntakeTurnResult with the reply, merged data, next phase and confidence

        Raises:
            ModelError: If the model call itself fails
        """
        text = self._call_model(
            system_prompt=self.SYSTEM_PROMPT,
            messages=self.build_messages(user_message, context),
            max_tokens=settings.intake_max_tokens,
        )

        try:
            parsed = parse_json_block(text)
        except GenerationError as e:
            logger.warning("Intake reply was not usable JSON, keeping prior state: %s", e)
            return IntakeTurnResult(
                response=text,
                extracted_data=context.extracted_data,
                phase=context.phase,
                confidence=DEGRADED_CONFIDENCE,
                degraded=True,
            )
        return self._interpret(parsed, text, context)

    def _interpret(self, parsed: Dict[str, Any], text: str, context: ConversationContext) -> IntakeTurnResult:
        updates = parsed.get("extractedData")
        if updates is None:
            updates = {}
        elif not isinstance(updates, dict):
            logger.warning("Ignoring extractedData of type %s", type(updates).__name__)
            updates = {}
        extracted = context.extracted_data.merged_with(updates)

        return IntakeTurnResult(
            response=parsed["response"] if isinstance(parsed.get("response"), str) else text,
            extracted_data=extracted,
            phase=_coerce_phase(parsed.get("phase"), context.phase),
            confidence=_coerce_confidence(parsed.get("confidence")),
            missing_fields=[str(m) for m in _as_list(parsed.get("missingFields"))],
        )


def _coerce_phase(value: Any, current: ConversationPhase) -> ConversationPhase:
    """The model's phase verbatim, or the current one if it gave none we know."""
    if not value:
        return current
    try:
        return ConversationPhase(value)
    except (ValueError, TypeError):
        logger.warning("Model returned unknown phase %r, staying in %s", value, current.value)
        return current


def _coerce_confidence(value: Any) -> float:
    if value is None:
        return DEFAULT_CONFIDENCE
    try:
        return max(0.0, min(1.0, float(value)))
    except (TypeError, ValueError):
        logger.warning("Model returned non-numeric confidence %r", value)
        return DEFAULT_CONFIDENCE


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []
