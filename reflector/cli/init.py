"""Workspace initialization command."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from reflector.config import load_config
from reflector.exceptions import ReflectorError
from reflector.timespec import next_fire_time
from reflector.workspace import InitializationReport, initialize_workspace

from .helpers import exit_with_error, resolve_root

console = Console()


def _print_report(report: InitializationReport) -> None:
    console.print("Initializing Reflector system...\n")
    if report.dry_run:
        console.print("[yellow](dry run - no changes will be written)[/yellow]\n")

    for rel in report.existed:
        console.print(f"  [dim]exists[/dim]  {rel}")
    for rel in report.created:
        console.print(f"  [green]create[/green]  {rel}")

    if report.schedules is None:
        console.print("\n[dim]Skipping schedule setup (--skip-schedule)[/dim]")
    else:
        daily = report.schedules.daily
        weekly = report.schedules.weekly
        console.print("\n[bold cyan]Schedule configuration[/bold cyan]")
        console.print(f"  Daily review:  {report.daily_time} {daily.timezone} ({daily.schedule})")
        console.print(f"  Weekly review: {report.weekly_time} Sunday {weekly.timezone} ({weekly.schedule})")
        next_daily = next_fire_time(daily.schedule, daily.timezone)
        if next_daily is not None:
            console.print(f"  [dim]Next daily run: {next_daily.isoformat()}[/dim]")
        console.print("\n  Register both jobs with your scheduler using the prompts in the report (--json).")

    console.print(
        Panel(
            "1. Create the daily and weekly review jobs\n"
            "2. Open PRINCIPLES.md and add your first principle\n"
            "3. Start logging outcomes after significant tasks: [cyan]reflector log --task ... --quality ...[/cyan]",
            title="Next Steps",
            border_style="blue",
        )
    )


def init(
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Workspace directory (default: current directory)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without writing anything"),
    skip_schedule: bool = typer.Option(False, "--skip-schedule", help="Create files only, skip schedule setup"),
    timezone: Optional[str] = typer.Option(None, "--timezone", help="Timezone for review jobs (default: auto-detect)"),
    daily_time: Optional[str] = typer.Option(None, "--daily-time", help="Daily review time as HH:MM (default: 03:30)"),
    weekly_time: Optional[str] = typer.Option(
        None, "--weekly-time", help="Weekly review time as HH:MM (default: 03:00)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
):
    """Set up PRINCIPLES.md, outcome tracking files and review schedules.

    Safe to run multiple times: existing files are preserved.
    """
    config = load_config().to_init_config(
        root=resolve_root(root),
        dry_run=dry_run,
        skip_schedule=skip_schedule,
        timezone=timezone,
        daily_time=daily_time,
        weekly_time=weekly_time,
    )

    try:
        report = initialize_workspace(config)
    except ReflectorError as e:
        exit_with_error(e)

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
    else:
        _print_report(report)
