"""Charter Agent - turns completed intake data into a project charter.

Unlike the intake dialogue there is no fallback here: a project cannot be
created without a charter, so a reply with no JSON object is an error.
Parts of the JSON that do not fit the charter shape are dropped instead.
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from agents.base_agent import BaseAgent, parse_json_block
from config import settings
from contracts import CharterContent, ProjectIntakeData
from providers import LLMProvider

logger = logging.getLogger(__name__)


class CharterAgent(BaseAgent):
    """Generates a CharterContent document in a single model call."""

    SYSTEM_PROMPT = (
        "You are a professional project management expert. Generate detailed, "
        "actionable project charters. Always respond with valid JSON only."
    )

    PROMPT_TEMPLATE = """Generate a comprehensive project charter based on the following project information:

{project_data}

Create a detailed charter with:
1. Executive summary (2-3 paragraphs)
2. SMART objectives with measurable targets
3. Scope definition (in-scope and out-of-scope items)
4. Stakeholder matrix with RACI assignments
5. Timeline with realistic milestones
6. Risk register with probability, impact, and mitigation strategies
7. Communication plan
8. Success metrics

Return the charter as a JSON object matching this structure:
{{
  "executive_summary": "string",
  "objectives": [{{"id": "string", "description": "string", "measurable_target": "string", "due_date": "string"}}],
  "scope": {{"in_scope": ["string"], "out_of_scope": ["string"]}},
  "stakeholders": [{{"id": "string", "name": "string", "role": "string", "raci_level": "responsible|accountable|consulted|informed"}}],
  "timeline": [{{"id": "string", "name": "string", "description": "string", "target_date": "string", "status": "pending", "completion_percentage": 0}}],
  "risks": [{{"id": "string", "description": "string", "probability": "low|medium|high", "impact": "low|medium|high", "mitigation": "string", "status": "identified"}}],
  "communication_plan": "string",
  "success_metrics": ["string"]
}}"""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        """Initialize the Charter Agent."""
        super().__init__(
            role="charter",
            llm_provider=llm_provider,
            model=model,
            provider=provider,
        )

    def get_task_description(self) -> str:
        return "Generate a project charter from intake data"

    def build_prompt(self, intake: ProjectIntakeData) -> str:
        return self.PROMPT_TEMPLATE.format(
            project_data=json.dumps(intake.model_dump(exclude_none=True, warnings=False), indent=2),
        )

    def generate(self, intake: ProjectIntakeData) -> CharterContent:
        """Generate the charter.

        Args:
            intake: Intake data gathered by the dialogue

        Returns:
            CharterContent (sections the model left out are empty)

        Raises:
            ModelError: If the model call fails
            GenerationError: If the reply holds no readable charter JSON
        """
        text = self._call_model(
            system_prompt=self.SYSTEM_PROMPT,
            messages=[{"role": "user", "content": self.build_prompt(intake)}],
            max_tokens=settings.charter_max_tokens,
        )

        data = parse_json_block(text)
        charter = _read_charter(data)

        logger.info(
            "Generated charter for %r: %d objectives, %d milestones, %d risks",
            intake.name, len(charter.objectives), len(charter.timeline), len(charter.risks),
        )
        return charter


def _read_charter(data: Dict[str, Any]) -> CharterContent:
    """Cast parsed JSON to CharterContent, dropping the entries that do not fit.

    An entry of a list section is dropped on its own; any other mistyped
    section is left at its empty default.
    """
    try:
        return CharterContent.model_validate(data)
    except ValidationError as e:
        errors = e.errors()

    bad_sections = set()
    bad_items: Dict[str, set] = {}
    for err in errors:
        section, *rest = err["loc"]
        if rest and isinstance(rest[0], int) and isinstance(data.get(section), list):
            bad_items.setdefault(section, set()).add(rest[0])
        else:
            bad_sections.add(section)

    cleaned = {k: v for k, v in data.items() if k not in bad_sections}
    for section, indices in bad_items.items():
        if section in cleaned:
            cleaned[section] = [item for i, item in enumerate(cleaned[section]) if i not in indices]

    logger.warning(
        "Charter reply had unreadable parts; dropped sections %s and entries %s",
        sorted(bad_sections), {k: sorted(v) for k, v in bad_items.items()},
    )
    return CharterContent.model_validate(cleaned)
