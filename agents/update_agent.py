"""Update Agent - reads a team member's free-text progress update."""

from typing import Optional

from pydantic import ValidationError

from agents.base_agent import BaseAgent, GenerationError, parse_json_block
from config import settings
from contracts import UpdateAnalysis
from providers import LLMProvider


class UpdateAgent(BaseAgent):
    """Extracts progress, status, blockers and sentiment from an update."""

    PROMPT_TEMPLATE = """Analyze this project update and extract structured information:

Task: {title}
Description: {description}
Current Status: {current_status}

Update from team member:
"{update}"

Return JSON:
{{
  "progress_percentage": 0-100,
  "new_status": "pending|in_progress|blocked|completed",
  "blockers": ["list any blockers mentioned"],
  "sentiment": "positive|neutral|concerning",
  "summary": "one sentence summary"
}}"""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        super().__init__(
            role="update",
            llm_provider=llm_provider,
            model=model,
            provider=provider,
        )

    def get_task_description(self) -> str:
        return "Analyze a task progress update"

    def analyze(
        self,
        update_content: str,
        title: str,
        description: str,
        current_status: str,
    ) -> UpdateAnalysis:
        """Analyze one update in the context of its task.

        Raises:
            ModelError: If the model call fails
            GenerationError: If the reply holds no readable analysis JSON
        """
        prompt = self.PROMPT_TEMPLATE.format(
            title=title,
            description=description,
            current_status=current_status,
            update=update_content,
        )
        text = self._call_model(
            system_prompt=None,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=settings.analysis_max_tokens,
        )
        try:
            return UpdateAnalysis.model_validate(parse_json_block(text))
        except ValidationError as e:
            raise GenerationError(f"Failed to parse update analysis: {e}", raw_response=text) from e
