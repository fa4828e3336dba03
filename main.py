#!/usr/bin/env python3
"""Autonoma CLI - talk a project into shape, then track it.

Usage:
    # Interactive intake conversation, saving the result
    python main.py intake --save ./acme

    # Charter from an existing intake file
    python main.py charter --intake ./acme/intake.json

    # Health score for a project snapshot
    python main.py score --project ./snapshot.json

    # Scale tier for a team size
    python main.py classify --team-size 12
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from agents import CharterAgent, GenerationError, IntakeAgent
from config import settings
from contracts import (
    CharterContent,
    ConversationContext,
    ConversationPhase,
    ProjectIntakeData,
    ProjectSnapshot,
    parse_timestamp,
)
from providers import ModelError, list_providers
from scoring import calculate_health_score, determine_project_scale


console = Console()

PROVIDER_CHOICES = ["anthropic", "openai", "litellm"]


def configure_logging(verbose: bool) -> None:
    """Route all log records through rich at the configured level."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def read_json_file(path: str) -> dict:
    """Load a JSON object from ``path``, exiting with a message on failure."""
    file = Path(path)
    if not file.is_file():
        console.print(f"[red]Error: file not found: {path}[/red]")
        sys.exit(1)
    try:
        return json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path} is not valid JSON: {e}[/red]")
        sys.exit(1)


def save_outputs(directory: str, intake: ProjectIntakeData, charter: Optional[CharterContent]) -> None:
    out = Path(directory)
    out.mkdir(parents=True, exist_ok=True)
    (out / "intake.json").write_text(intake.model_dump_json(indent=2, exclude_none=True, warnings=False))
    if charter is not None:
        (out / "charter.json").write_text(charter.model_dump_json(indent=2))
        (out / "charter.md").write_text(charter.to_markdown())
    console.print(f"\n[bold]Output saved to:[/bold] {out}")


def print_charter(charter: CharterContent) -> None:
    console.print(Panel(Markdown(charter.to_markdown()), title="Project Charter", border_style="blue"))


def generate_charter(intake: ProjectIntakeData, provider: Optional[str], model: Optional[str]) -> CharterContent:
    """Generate a charter, exiting with a message if the model fails."""
    agent = CharterAgent(model=model, provider=provider)
    with console.status("Generating charter..."):
        try:
            return agent.generate(intake)
        except (ModelError, GenerationError) as e:
            console.print(f"[red]Charter generation failed:[/red] {e}")
            sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def cli(verbose: bool):
    """Autonoma: conversational project intake, charters and health tracking."""
    configure_logging(verbose)


@cli.command()
@click.option(
    "--provider", "-p",
    type=click.Choice(PROVIDER_CHOICES),
    default=None,
    help=f"LLM provider (default: {settings.default_provider})"
)
@click.option(
    "--model",
    default=None,
    help="Model name (e.g., claude-sonnet, gpt-4o)"
)
@click.option(
    "--save", "-o", "save_dir",
    default=None,
    help="Directory to write intake.json and charter files to"
)
def intake(provider: Optional[str], model: Optional[str], save_dir: Optional[str]):
    """Describe a project in conversation until it is ready for a charter."""
    console.print(Panel.fit(
        "[bold blue]Autonoma[/bold blue]\n"
        "[dim]Tell me about the project you want to start. Type 'quit' to stop.[/dim]",
        border_style="blue"
    ))

    agent = IntakeAgent(model=model, provider=provider)
    context = ConversationContext()

    while context.phase not in (ConversationPhase.CONFIRMATION, ConversationPhase.COMPLETE):
        message = Prompt.ask("\n[bold green]You[/bold green]").strip()
        if not message:
            continue
        if message.lower() in ("quit", "exit"):
            break

        with console.status("Thinking..."):
            try:
                result = agent.advance(message, context)
            except ModelError as e:
                console.print(f"[red]Model error:[/red] {e}")
                sys.exit(1)

        context = context.record_turn(message, result)
        console.print(f"\n[bold blue]Autonoma[/bold blue] {result.response}")
        console.print(
            f"[dim]phase={result.phase.value} confidence={result.confidence:.0%}"
            + (f" missing={', '.join(result.missing_fields)}" if result.missing_fields else "")
            + "[/dim]"
        )

    charter_doc = None
    if context.phase in (ConversationPhase.CONFIRMATION, ConversationPhase.COMPLETE):
        if Confirm.ask("\nGenerate the project charter now?", default=True):
            charter_doc = generate_charter(context.extracted_data, provider, model)
            print_charter(charter_doc)
            scale = determine_project_scale(context.extracted_data)
            console.print(f"[green]Scale:[/green] {scale.value}")

    if save_dir:
        save_outputs(save_dir, context.extracted_data, charter_doc)

    console.print(
        f"\n[dim]Tokens: {agent.total_usage.input_tokens:,} in / "
        f"{agent.total_usage.output_tokens:,} out[/dim]"
    )


@cli.command()
@click.option("--intake", "-i", "intake_path", required=True, help="Path to an intake JSON file")
@click.option("--provider", "-p", type=click.Choice(PROVIDER_CHOICES), default=None, help="LLM provider")
@click.option("--model", default=None, help="Model name")
@click.option("--output", "-o", "output_dir", default=None, help="Directory to write charter files to")
def charter(intake_path: str, provider: Optional[str], model: Optional[str], output_dir: Optional[str]):
    """Generate a project charter from intake data."""
    data = ProjectIntakeData.model_validate(read_json_file(intake_path))
    result = generate_charter(data, provider, model)
    print_charter(result)
    if output_dir:
        save_outputs(output_dir, data, result)


@cli.command()
@click.option("--project", "-i", "project_path", required=True, help="Path to a project snapshot JSON file")
@click.option("--now", default=None, help="Evaluation time as ISO-8601 (default: now)")
@click.option("--json", "as_json", is_flag=True, help="Print the score as JSON")
def score(project_path: str, now: Optional[str], as_json: bool):
    """Compute the health score of a project snapshot."""
    snapshot = ProjectSnapshot.model_validate(read_json_file(project_path))
    at: Optional[datetime] = parse_timestamp(now) if now else None
    health = calculate_health_score(snapshot, now=at)

    if as_json:
        click.echo(health.model_dump_json(indent=2))
        return

    table = Table(title=f"Project Health: {health.overall}/100")
    table.add_column("Factor")
    table.add_column("Score", justify="right")
    table.add_column("Trend")
    table.add_column("Notes", style="dim")
    for factor in health.factors:
        table.add_row(factor.name, str(factor.score), factor.trend.value, factor.notes or "")
    table.add_row("Stakeholder", str(health.stakeholder), "stable", "placeholder")
    console.print(table)


@cli.command()
@click.option("--team-size", "-t", type=int, default=None, help="Team size (default: 5)")
@click.option("--intake", "-i", "intake_path", default=None, help="Read team size from an intake JSON file")
def classify(team_size: Optional[int], intake_path: Optional[str]):
    """Print the project scale tier for a team size."""
    if intake_path:
        data = ProjectIntakeData.model_validate(read_json_file(intake_path))
    else:
        data = ProjectIntakeData(team_size=team_size)
    console.print(determine_project_scale(data).value)


@cli.command()
def providers():
    """List available LLM providers."""
    console.print("[bold]Available LLM Providers:[/bold]\n")
    for name, available in list_providers().items():
        status = "[green]✓ Ready[/green]" if available else "[red]✗ No API key[/red]"
        console.print(f"  {name:12} {status}")
    console.print("\n[dim]Set API keys via environment variables:[/dim]")
    console.print("  ANTHROPIC_API_KEY, OPENAI_API_KEY (or AUTONOMA_ prefixed)")


if __name__ == "__main__":
    cli()
