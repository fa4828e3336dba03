"""Escalation Agent - decides whether a project's status warrants escalation."""

from typing import List, Optional

from pydantic import ValidationError

from agents.base_agent import BaseAgent, GenerationError, parse_json_block
from config import settings
from contracts import EscalationRecommendation
from providers import LLMProvider


class EscalationAgent(BaseAgent):
    """Recommends an escalation (or none) from project health statistics."""

    PROMPT_TEMPLATE = """Analyze this project status and determine if escalation is needed:

Project: {name}
Health Score: {health_score}/100
Overdue Tasks: {overdue_tasks}
Blocked Tasks: {blocked_tasks}
Recent Issues: {recent_issues}

Determine if escalation is needed. Return JSON:
{{
  "should_escalate": boolean,
  "severity": "low|medium|high|critical",
  "trigger_type": "timeline|resource|scope|communication|quality|budget",
  "recommended_action": "what should be done",
  "message": "escalation message for stakeholders"
}}"""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        super().__init__(
            role="escalation",
            llm_provider=llm_provider,
            model=model,
            provider=provider,
        )

    def get_task_description(self) -> str:
        return "Recommend whether to escalate a project"

    def recommend(
        self,
        name: str,
        health_score: int,
        overdue_tasks: int,
        blocked_tasks: int,
        recent_issues: List[str],
    ) -> EscalationRecommendation:
        """Ask the model for an escalation recommendation.

        Raises:
            ModelError: If the model call fails
            GenerationError: If the reply holds no readable recommendation JSON
        """
        prompt = self.PROMPT_TEMPLATE.format(
            name=name,
            health_score=health_score,
            overdue_tasks=overdue_tasks,
            blocked_tasks=blocked_tasks,
            recent_issues=", ".join(recent_issues),
        )
        text = self._call_model(
            system_prompt=None,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=settings.analysis_max_tokens,
        )
        try:
            return EscalationRecommendation.model_validate(parse_json_block(text))
        except ValidationError as e:
            raise GenerationError(f"Failed to parse escalation recommendation: {e}", raw_response=text) from e
