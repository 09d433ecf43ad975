"""Outcome and principle-change logging."""

from .models import (
    PRINCIPLE_ACTIONS,
    QUALITY_TYPES,
    OutcomeEntry,
    OutcomeQuality,
    PrincipleAction,
    PrincipleChange,
    build_entry,
    build_principle_change,
)
from .storage import (
    append_entry,
    append_principle_change,
    get_outcomes_path,
    get_principles_history_path,
    load_outcomes,
    load_principle_changes,
    log_outcome,
    log_principle_change,
)

__all__ = [
    "OutcomeEntry",
    "OutcomeQuality",
    "PRINCIPLE_ACTIONS",
    "PrincipleAction",
    "PrincipleChange",
    "QUALITY_TYPES",
    "append_entry",
    "append_principle_change",
    "build_entry",
    "build_principle_change",
    "get_outcomes_path",
    "get_principles_history_path",
    "load_outcomes",
    "load_principle_changes",
    "log_outcome",
    "log_principle_change",
]
