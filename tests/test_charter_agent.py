"""Tests for charter generation."""

import json

import pytest

from agents import CharterAgent, GenerationError
from contracts import CharterContent, ProjectIntakeData
from providers import ModelError

INTAKE = ProjectIntakeData(
    name="Apollo",
    objective="Launch the v2 mobile app",
    success_criteria=["10k installs in the first month"],
    key_stakeholders=["Head of Product", "CTO"],
    target_timeline="Q3",
    team_size=6,
)

FULL_CHARTER = {
    "executive_summary": "Apollo delivers the v2 app.",
    "objectives": [
        {"id": "obj-1", "description": "Ship v2", "measurable_target": "10k installs", "due_date": "2025-09-30"},
    ],
    "scope": {"in_scope": ["iOS", "Android"], "out_of_scope": ["Web"]},
    "stakeholders": [{"id": "s-1", "name": "Dana", "role": "Head of Product", "raci_level": "accountable"}],
    "timeline": [
        {"id": "m-1", "name": "Beta", "description": "Closed beta", "target_date": "2025-08-01",
         "status": "pending", "completion_percentage": 0},
    ],
    "risks": [
        {"id": "r-1", "description": "App store review delays", "probability": "medium",
         "impact": "high", "mitigation": "Submit early", "status": "identified"},
    ],
    "communication_plan": "Weekly status email.",
    "success_metrics": ["Installs", "Crash-free sessions"],
}


class TestGenerate:
    """Charter replies are parsed into CharterContent."""

    def test_full_charter(self, mock_provider):
        provider = mock_provider(json.dumps(FULL_CHARTER))

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert isinstance(charter, CharterContent)
        assert charter.executive_summary == "Apollo delivers the v2 app."
        assert charter.objectives[0].measurable_target == "10k installs"
        assert charter.scope.out_of_scope == ["Web"]
        assert charter.stakeholders[0].raci_level == "accountable"
        assert charter.timeline[0].name == "Beta"
        assert charter.risks[0].impact == "high"
        assert charter.success_metrics == ["Installs", "Crash-free sessions"]

    def test_fenced_reply(self, mock_provider):
        provider = mock_provider("```json\n" + json.dumps(FULL_CHARTER) + "\n```")

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert charter.communication_plan == "Weekly status email."

    def test_missing_sections_are_empty(self, mock_provider):
        provider = mock_provider('{"executive_summary": "Short one."}')

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert charter.executive_summary == "Short one."
        assert charter.objectives == []
        assert charter.risks == []
        assert charter.scope.in_scope == []

    def test_sparse_entries_get_defaults(self, mock_provider):
        provider = mock_provider(json.dumps({
            "timeline": [{"name": "Kickoff"}],
            "risks": [{"description": "Scope creep"}],
            "stakeholders": [{"name": "Sam"}],
        }))

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert charter.timeline[0].status == "pending"
        assert charter.timeline[0].completion_percentage == 0
        assert charter.risks[0].probability == "medium"
        assert charter.risks[0].status == "identified"
        assert charter.stakeholders[0].raci_level == "informed"

    def test_null_entries_fall_back_to_defaults(self, mock_provider):
        provider = mock_provider(json.dumps({
            "executive_summary": "S",
            "timeline": [{"name": "M1", "description": None, "target_date": None, "completion_percentage": None}],
            "risks": [{"description": "Churn", "mitigation": None, "probability": None}],
            "communication_plan": None,
        }))

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert charter.timeline[0].name == "M1"
        assert charter.timeline[0].description == ""
        assert charter.timeline[0].completion_percentage == 0
        assert charter.risks[0].mitigation == ""
        assert charter.risks[0].probability == "medium"
        assert charter.communication_plan == ""

    def test_numbers_read_as_text(self, mock_provider):
        provider = mock_provider(json.dumps({
            "objectives": [{"id": 1, "description": "Grow", "measurable_target": 10000}],
            "success_metrics": [99.9],
        }))

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert charter.objectives[0].id == "1"
        assert charter.objectives[0].measurable_target == "10000"
        assert charter.success_metrics == ["99.9"]

    def test_mistyped_parts_are_dropped(self, mock_provider):
        provider = mock_provider(json.dumps({
            "executive_summary": "Still useful.",
            "objectives": "ship it",
            "scope": ["iOS"],
            "timeline": [
                {"name": "Beta", "completion_percentage": "about half"},
                {"name": "Launch"},
                "Retro",
            ],
            "success_metrics": ["Installs", {"metric": "DAU"}],
        }))

        charter = CharterAgent(llm_provider=provider).generate(INTAKE)

        assert charter.executive_summary == "Still useful."
        assert charter.objectives == []
        assert charter.scope.in_scope == []
        assert [m.name for m in charter.timeline] == ["Launch"]
        assert charter.success_metrics == ["Installs"]

    def test_prompt_contains_intake_data(self, mock_provider):
        provider = mock_provider(json.dumps(FULL_CHARTER))

        CharterAgent(llm_provider=provider).generate(INTAKE)

        kwargs = provider.complete.call_args.kwargs
        assert kwargs["system_prompt"] == CharterAgent.SYSTEM_PROMPT
        prompt = kwargs["messages"][0]["content"]
        assert '"name": "Apollo"' in prompt
        assert '"team_size": 6' in prompt
        assert "budget_range" not in prompt.split("Create a detailed charter")[0]


class TestGenerateFailures:
    """There is no fallback charter."""

    @pytest.mark.parametrize("text", [
        "I could not produce a charter.",
        '{"executive_summary": "cut off',
    ])
    def test_unusable_reply_raises(self, mock_provider, text):
        provider = mock_provider(text)

        with pytest.raises(GenerationError) as exc_info:
            CharterAgent(llm_provider=provider).generate(INTAKE)

        assert exc_info.value.raw_response == text

    def test_model_error_propagates(self, mock_provider):
        provider = mock_provider()
        provider.complete.side_effect = ModelError("timeout", provider="mock")

        with pytest.raises(ModelError):
            CharterAgent(llm_provider=provider).generate(INTAKE)


class TestToMarkdown:
    def test_renders_sections(self):
        markdown = CharterContent.model_validate(FULL_CHARTER).to_markdown()

        assert markdown.startswith("## Executive Summary")
        assert "- Ship v2 (target: 10k installs)" in markdown
        assert "| Dana | Head of Product | accountable |" in markdown
        assert "- **Beta** (2025-08-01): Closed beta" in markdown
        assert "## Communication Plan" in markdown

    def test_empty_charter_has_only_summary(self):
        assert CharterContent().to_markdown() == "## Executive Summary\n"
