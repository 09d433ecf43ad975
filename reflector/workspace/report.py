"""Initialization report models."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from ..config import InitConfig


class ScheduledPrompt(BaseModel):
    """One recurring review job for the scheduling host."""

    schedule: str = Field(..., description="Five-field cron expression")
    timezone: str = Field(..., description="IANA timezone the schedule runs in")
    prompt: str = Field(..., description="Prompt text delivered when the job fires")


class SchedulePayload(BaseModel):
    daily: ScheduledPrompt
    weekly: ScheduledPrompt


class InitializationReport(BaseModel):
    """What an initialization call found, created, and derived."""

    root: Path
    timezone: str
    daily_time: str
    weekly_time: str
    dry_run: bool = False
    created: List[str] = Field(default_factory=list)
    existed: List[str] = Field(default_factory=list)
    schedules: Optional[SchedulePayload] = None


class ReportBuilder:
    """Collects per-path results during initialization."""

    def __init__(self, config: InitConfig, timezone: str):
        self._config = config
        self._timezone = timezone
        self._created: List[str] = []
        self._existed: List[str] = []
        self._schedules: Optional[SchedulePayload] = None

    def created(self, rel: str) -> None:
        self._created.append(rel)

    def existed(self, rel: str) -> None:
        self._existed.append(rel)

    def schedules(self, payload: SchedulePayload) -> None:
        self._schedules = payload

    def build(self) -> InitializationReport:
        return InitializationReport(
            root=self._config.root,
            timezone=self._timezone,
            daily_time=self._config.daily_time,
            weekly_time=self._config.weekly_time,
            dry_run=self._config.dry_run,
            created=list(self._created),
            existed=list(self._existed),
            schedules=self._schedules,
        )
