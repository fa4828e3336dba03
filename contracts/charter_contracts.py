"""Charter contracts for the generated project planning document.

Fields default to empty so a charter with short or missing sections still
loads; consumers iterate whatever arrived.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from enum import Enum


class RACILevel(str, Enum):
    """Stakeholder responsibility classification."""
    RESPONSIBLE = "responsible"
    ACCOUNTABLE = "accountable"
    CONSULTED = "consulted"
    INFORMED = "informed"


class CharterSection(BaseModel):
    """Base for charter parts: nulls fall back to defaults, numbers read as text."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Objective(CharterSection):
    """A SMART objective."""

    id: Optional[str] = None
    description: str = ""
    measurable_target: str = ""
    due_date: Optional[str] = None


class Scope(CharterSection):
    """What the project will and will not deliver."""
    in_scope: List[str] = Field(default_factory=list)
    out_of_scope: List[str] = Field(default_factory=list)


class CharterStakeholder(CharterSection):
    """A stakeholder row of the RACI matrix."""

    id: Optional[str] = None
    name: str = ""
    role: str = ""
    raci_level: str = Field(default="informed", description="responsible, accountable, consulted, informed")


class CharterMilestone(CharterSection):
    """A milestone stub on the charter timeline."""

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    target_date: Optional[str] = None
    status: str = Field(default="pending", description="pending, in_progress, completed, missed")
    completion_percentage: float = 0


class CharterRisk(CharterSection):
    """A risk register entry."""

    id: Optional[str] = None
    description: str = ""
    probability: str = Field(default="medium", description="low, medium, high")
    impact: str = Field(default="medium", description="low, medium, high")
    mitigation: str = ""
    status: str = Field(default="identified", description="identified, mitigating, resolved, occurred")


class CharterContent(CharterSection):
    """The project charter produced once intake is sufficient."""

    executive_summary: str = ""
    objectives: List[Objective] = Field(default_factory=list)
    scope: Scope = Field(default_factory=Scope)
    stakeholders: List[CharterStakeholder] = Field(default_factory=list)
    timeline: List[CharterMilestone] = Field(default_factory=list)
    risks: List[CharterRisk] = Field(default_factory=list)
    communication_plan: str = ""
    success_metrics: List[str] = Field(default_factory=list)

    def to_markdown(self) -> str:
        """Render the charter as a markdown document."""
        sections = [
            "## Executive Summary",
            self.executive_summary,
        ]

        if self.objectives:
            sections.append("\n## Objectives\n")
            for o in self.objectives:
                target = f" (target: {o.measurable_target})" if o.measurable_target else ""
                sections.append(f"- {o.description}{target}")

        if self.scope.in_scope or self.scope.out_of_scope:
            sections.append("\n## Scope\n")
            sections.append("**In scope:**\n")
            sections.extend(f"- {s}" for s in self.scope.in_scope)
            sections.append("\n**Out of scope:**\n")
            sections.extend(f"- {s}" for s in self.scope.out_of_scope)

        if self.stakeholders:
            sections.append("\n## Stakeholders\n")
            sections.append("| Name | Role | RACI |")
            sections.append("|------|------|------|")
            for s in self.stakeholders:
                sections.append(f"| {s.name} | {s.role} | {s.raci_level} |")

        if self.timeline:
            sections.append("\n## Timeline\n")
            for m in self.timeline:
                when = f" ({m.target_date})" if m.target_date else ""
                sections.append(f"- **{m.name}**{when}: {m.description}")

        if self.risks:
            sections.append("\n## Risks\n")
            sections.append("| Risk | Probability | Impact | Mitigation |")
            sections.append("|------|-------------|--------|------------|")
            for r in self.risks:
                sections.append(f"| {r.description} | {r.probability} | {r.impact} | {r.mitigation} |")

        if self.communication_plan:
            sections.append(f"\n## Communication Plan\n\n{self.communication_plan}")

        if self.success_metrics:
            sections.append("\n## Success Metrics\n")
            sections.extend(f"- {m}" for m in self.success_metrics)

        return "\n".join(sections)
