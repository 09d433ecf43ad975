"""Workspace provisioning for the reflector loop.

A reflector workspace holds:
- PRINCIPLES.md (decision-making framework)
- memory/reflector/outcomes.jsonl (task outcome log)
- memory/reflector/principles-history.jsonl (principle change log)
- memory/reflector/weekly-summaries/ (weekly review output)
"""

from .initializer import build_schedules, initialize_workspace
from .layout import DEFAULT_LAYOUT, WorkspaceLayout, principles_template
from .prompts import load_prompt
from .report import InitializationReport, ScheduledPrompt, SchedulePayload

__all__ = [
    "DEFAULT_LAYOUT",
    "InitializationReport",
    "ScheduledPrompt",
    "SchedulePayload",
    "WorkspaceLayout",
    "build_schedules",
    "initialize_workspace",
    "load_prompt",
    "principles_template",
]
