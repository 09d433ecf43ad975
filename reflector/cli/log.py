"""Outcome and principle-change logging commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from reflector.exceptions import ReflectorError
from reflector.outcomes import QUALITY_TYPES, load_outcomes, log_outcome, log_principle_change

from .helpers import exit_with_error, resolve_root

console = Console()


def log_command(
    task: Optional[str] = typer.Option(None, "--task", "-t", help="What was done"),
    quality: Optional[str] = typer.Option(None, "--quality", "-q", help=" | ".join(QUALITY_TYPES)),
    delta: Optional[str] = typer.Option(None, "--delta", help="What changed between output and final result"),
    lesson: Optional[str] = typer.Option(None, "--lesson", help="What this teaches about effectiveness"),
    channel: Optional[str] = typer.Option(
        None, "--channel", envvar="REFLECTOR_CHANNEL", help="Communication channel"
    ),
    principle_candidate: Optional[bool] = typer.Option(
        None,
        "--principle-candidate/--no-principle-candidate",
        help="Flag for principle extraction (auto-set for corrections)",
    ),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Workspace directory (default: current directory)"),
):
    """Append a structured outcome entry to memory/reflector/outcomes.jsonl.

    Examples:
        reflector log --task "Draft email" --quality edit --lesson "Keep it shorter"
        reflector log --task "Date check" --quality correction --delta "Wrong day"
    """
    try:
        entry = log_outcome(
            resolve_root(root),
            task,
            quality,
            channel=channel,
            delta=delta,
            lesson=lesson,
            principle_candidate=principle_candidate,
        )
    except ReflectorError as e:
        exit_with_error(e)

    console.print("[green]✓[/green] Outcome logged.")
    if entry.principle_candidate:
        console.print("Flagged as principle candidate.")


def principle_command(
    action: str = typer.Argument(..., help="add | modify | retire"),
    principle: str = typer.Argument(..., help="Principle name"),
    reason: Optional[str] = typer.Option(None, "--reason", help="Why the principle changed"),
    evidence: Optional[str] = typer.Option(None, "--evidence", help="Outcomes supporting the change"),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Workspace directory (default: current directory)"),
):
    """Record a principle change in memory/reflector/principles-history.jsonl."""
    try:
        change = log_principle_change(resolve_root(root), action, principle, reason=reason, evidence=evidence)
    except ReflectorError as e:
        exit_with_error(e)

    console.print(f"[green]✓[/green] Logged principle {change.action.value}: {change.principle}")


def outcomes_command(
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Workspace directory (default: current directory)"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of entries to show"),
):
    """List the most recent logged outcomes."""
    workspace_root = resolve_root(root)
    try:
        entries = load_outcomes(workspace_root)
    except ReflectorError as e:
        exit_with_error(e)

    if not entries:
        console.print("[yellow]No outcomes logged yet[/yellow]")
        return

    shown = entries[-limit:] if limit > 0 else entries

    table = Table(title=f"Outcomes ({len(shown)} of {len(entries)})")
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Quality", style="cyan")
    table.add_column("Task")
    table.add_column("Channel", style="dim")
    table.add_column("Candidate", justify="center")

    for entry in shown:
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
            entry.output_quality.value,
            entry.task,
            entry.channel or "-",
            "✓" if entry.principle_candidate else "",
        )

    console.print(table)
