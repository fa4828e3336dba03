"""Tests for the click CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from agents import GenerationError
from contracts import CharterContent
from main import cli


@pytest.fixture
def runner():
    return CliRunner()


def _write(path, data):
    path.write_text(json.dumps(data))
    return str(path)


class TestScoreCommand:
    def test_json_output(self, runner, tmp_path):
        snapshot = _write(tmp_path / "snapshot.json", {
            "tasks": [
                {"status": "completed", "due_date": "2025-05-01"},
                {"status": "pending", "due_date": "2025-05-01"},
            ],
            "escalations": [{"status": "open", "severity": "high"}],
            "updates_this_week": 2,
        })

        result = runner.invoke(cli, ["score", "--project", snapshot, "--now", "2025-06-01T00:00:00Z", "--json"])

        assert result.exit_code == 0, result.output
        health = json.loads(result.output)
        assert health["timeline"] == 50
        assert health["resource"] == 40
        assert health["quality"] == 100
        assert health["risk"] == 90
        # 15 + 8 + 25 + 22.5
        assert health["overall"] == 71

    def test_table_output(self, runner, tmp_path):
        snapshot = _write(tmp_path / "snapshot.json", {})
        result = runner.invoke(cli, ["score", "--project", snapshot])
        assert result.exit_code == 0, result.output
        assert "Project Health: 68/100" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["score", "--project", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "file not found" in result.output


class TestClassifyCommand:
    @pytest.mark.parametrize("size,expected", [("2", "micro"), ("12", "medium"), ("500", "enterprise")])
    def test_team_size(self, runner, size, expected):
        result = runner.invoke(cli, ["classify", "--team-size", size])
        assert result.exit_code == 0
        assert result.output.strip() == expected

    def test_default(self, runner):
        result = runner.invoke(cli, ["classify"])
        assert result.output.strip() == "small"

    def test_from_intake_file(self, runner, tmp_path):
        intake = _write(tmp_path / "intake.json", {"name": "Apollo", "team_size": 60})
        result = runner.invoke(cli, ["classify", "--intake", intake])
        assert result.output.strip() == "large"


class TestCharterCommand:
    def test_writes_outputs(self, runner, tmp_path):
        intake = _write(tmp_path / "intake.json", {"name": "Apollo", "objective": "Ship v2"})
        out_dir = tmp_path / "out"
        charter = CharterContent(executive_summary="Apollo ships v2.", success_metrics=["Installs"])

        with patch("main.CharterAgent") as agent_class:
            agent_class.return_value.generate.return_value = charter
            result = runner.invoke(cli, ["charter", "--intake", intake, "--output", str(out_dir)])

        assert result.exit_code == 0, result.output
        assert json.loads((out_dir / "charter.json").read_text())["executive_summary"] == "Apollo ships v2."
        assert (out_dir / "charter.md").read_text().startswith("## Executive Summary")
        assert json.loads((out_dir / "intake.json").read_text()) == {"name": "Apollo", "objective": "Ship v2"}

    def test_generation_failure_exits(self, runner, tmp_path):
        intake = _write(tmp_path / "intake.json", {"name": "Apollo", "objective": "Ship v2"})

        with patch("main.CharterAgent") as agent_class:
            agent_class.return_value.generate.side_effect = GenerationError("no JSON")
            result = runner.invoke(cli, ["charter", "--intake", intake])

        assert result.exit_code == 1
        assert "Charter generation failed" in result.output


class TestProvidersCommand:
    def test_lists_providers(self, runner):
        result = runner.invoke(cli, ["providers"])
        assert result.exit_code == 0
        assert "anthropic" in result.output
        assert "litellm" in result.output
