"""Idempotent workspace initialization.

Creates the reflector directory structure, PRINCIPLES.md template and
empty tracking files, then derives the daily and weekly review schedules.
Safe to run any number of times: existing files are never overwritten,
and every run after the first reports nothing as created.
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import InitConfig, is_valid_timezone, resolve_timezone
from ..exceptions import InvalidTimezoneError, StorageError
from ..timespec import Frequency, parse_time, time_to_schedule
from .layout import DEFAULT_LAYOUT, FileContent, WorkspaceLayout
from .prompts import DAILY_PROMPT, WEEKLY_PROMPT, PromptLoader, load_prompt
from .report import InitializationReport, ReportBuilder, ScheduledPrompt, SchedulePayload

logger = logging.getLogger(__name__)


def _ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to create directory {path}: {e}") from e


def _create_file(path: Path, content: str) -> bool:
    """Write content to a new file.

    Returns:
        True if the file was created, False if another writer created it first
    """
    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(content)
    except FileExistsError:
        return False
    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e
    return True


def _render(rel: str, content: FileContent) -> str:
    if isinstance(content, str):
        return content
    try:
        return content()
    except OSError as e:
        raise StorageError(f"Failed to load default content for {rel}: {e}") from e


def _validate(config: InitConfig) -> None:
    parse_time(config.daily_time)
    parse_time(config.weekly_time)
    if not config.skip_schedule and config.timezone and not is_valid_timezone(config.timezone):
        raise InvalidTimezoneError(config.timezone)


def build_schedules(
    daily_time: str,
    weekly_time: str,
    timezone: str,
    prompt_loader: PromptLoader = load_prompt,
) -> SchedulePayload:
    """Derive the review schedules and attach their prompts.

    Raises:
        PromptUnavailableError: If either prompt cannot be loaded
    """
    daily_prompt = prompt_loader(DAILY_PROMPT)
    weekly_prompt = prompt_loader(WEEKLY_PROMPT)

    return SchedulePayload(
        daily=ScheduledPrompt(
            schedule=time_to_schedule(daily_time, Frequency.DAILY),
            timezone=timezone,
            prompt=daily_prompt,
        ),
        weekly=ScheduledPrompt(
            schedule=time_to_schedule(weekly_time, Frequency.WEEKLY),
            timezone=timezone,
            prompt=weekly_prompt,
        ),
    )


def initialize_workspace(
    config: Optional[InitConfig] = None,
    layout: WorkspaceLayout = DEFAULT_LAYOUT,
    prompt_loader: PromptLoader = load_prompt,
) -> InitializationReport:
    """Ensure the reflector workspace exists under config.root.

    Args:
        config: Initialization settings (defaults to InitConfig())
        layout: Directories and files to provision
        prompt_loader: Callable returning prompt text for a logical name

    Returns:
        Report of created and pre-existing paths plus the schedule payload

    Raises:
        TimeSpecError: If a review time is invalid (nothing is written)
        InvalidTimezoneError: If an explicit timezone is unknown (nothing is written)
        PromptUnavailableError: If a review prompt cannot be loaded
        StorageError: If a filesystem operation fails
    """
    if config is None:
        config = InitConfig()

    # Validate before touching the filesystem.
    _validate(config)

    root = Path(config.root)
    timezone = resolve_timezone(config.timezone)
    report = ReportBuilder(config, timezone)

    logger.info("Initializing reflector workspace at %s%s", root, " (dry run)" if config.dry_run else "")

    for rel in layout.directories:
        path = root / rel
        label = rel + "/"
        if path.exists():
            logger.debug("exists  %s", label)
            report.existed(label)
            continue
        logger.info("create  %s", label)
        if not config.dry_run:
            _ensure_directory(path)
        report.created(label)

    for rel, content in layout.files:
        path = root / rel
        if path.exists():
            logger.debug("exists  %s", rel)
            report.existed(rel)
            continue
        if config.dry_run:
            logger.info("create  %s", rel)
            report.created(rel)
            continue
        text = _render(rel, content)
        _ensure_directory(path.parent)
        if _create_file(path, text):
            logger.info("create  %s", rel)
            report.created(rel)
        else:
            logger.info("%s was created concurrently, leaving it untouched", rel)
            report.existed(rel)

    if not config.skip_schedule:
        report.schedules(build_schedules(config.daily_time, config.weekly_time, timezone, prompt_loader))

    return report.build()
