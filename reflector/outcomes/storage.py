"""Append-only JSONL storage for outcome and principle-change records."""

import json
import logging
import threading
from pathlib import Path
from typing import List, Optional, Type, TypeVar, Union

import portalocker
from pydantic import ValidationError

from ..exceptions import StorageError
from ..workspace.layout import OUTCOMES_FILE, PRINCIPLES_HISTORY_FILE
from .models import (
    LogRecord,
    OutcomeEntry,
    PrincipleChange,
    TimestampInput,
    build_entry,
    build_principle_change,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=LogRecord)

# Serializes writers within this process; portalocker covers other processes.
_write_lock = threading.Lock()


def get_outcomes_path(root: Union[str, Path]) -> Path:
    return Path(root) / OUTCOMES_FILE


def get_principles_history_path(root: Union[str, Path]) -> Path:
    return Path(root) / PRINCIPLES_HISTORY_FILE


def _append_line(path: Path, record: LogRecord) -> None:
    line = json.dumps(record.to_json_dict(), ensure_ascii=False) + "\n"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to create directory {path.parent}: {e}") from e

    with _write_lock:
        try:
            with open(path, "a", encoding="utf-8") as f:
                portalocker.lock(f, portalocker.LOCK_EX)
                try:
                    f.write(line)
                    f.flush()
                finally:
                    portalocker.unlock(f)
        except portalocker.exceptions.LockException as e:
            raise StorageError(f"Failed to acquire lock on {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to append to {path}: {e}") from e


def append_entry(entry: OutcomeEntry, root: Union[str, Path]) -> Path:
    """Append an outcome entry as one JSON line.

    Creates memory/reflector/ and the log file if they don't exist.
    Existing lines are never read or rewritten.

    Args:
        entry: Validated outcome entry
        root: Workspace root

    Returns:
        Path to the outcome log

    Raises:
        StorageError: If the directory or line cannot be written
    """
    path = get_outcomes_path(root)
    _append_line(path, entry)
    logger.debug("Appended %s outcome to %s", entry.output_quality.value, path)
    return path


def append_principle_change(change: PrincipleChange, root: Union[str, Path]) -> Path:
    """Append a principle change as one JSON line to principles-history.jsonl."""
    path = get_principles_history_path(root)
    _append_line(path, change)
    logger.debug("Appended principle %s for '%s' to %s", change.action.value, change.principle, path)
    return path


def log_outcome(
    root: Union[str, Path],
    task,
    quality,
    *,
    channel: Optional[str] = None,
    delta: Optional[str] = None,
    lesson: Optional[str] = None,
    timestamp: TimestampInput = None,
    principle_candidate: Optional[bool] = None,
) -> OutcomeEntry:
    """Validate, build, and append an outcome entry.

    Validation happens before any filesystem access, so a rejected call
    leaves the log untouched.

    Returns:
        The entry that was written
    """
    entry = build_entry(
        task,
        quality,
        channel=channel,
        delta=delta,
        lesson=lesson,
        timestamp=timestamp,
        principle_candidate=principle_candidate,
    )
    append_entry(entry, root)
    return entry


def log_principle_change(
    root: Union[str, Path],
    action,
    principle,
    *,
    reason: Optional[str] = None,
    evidence: Optional[str] = None,
    timestamp: TimestampInput = None,
) -> PrincipleChange:
    """Validate, build, and append a principle change."""
    change = build_principle_change(action, principle, reason=reason, evidence=evidence, timestamp=timestamp)
    append_principle_change(change, root)
    return change


def _load_records(path: Path, model: Type[RecordT]) -> List[RecordT]:
    if not path.exists():
        return []

    records = []
    try:
        with open(path, "rb") as f:
            for line_num, raw in enumerate(f, 1):
                try:
                    line = raw.decode("utf-8").strip()
                    if not line:
                        continue
                    records.append(model.model_validate(json.loads(line)))
                except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
                    logger.warning("Skipping malformed line %d in %s: %s", line_num, path, e)
    except OSError as e:
        raise StorageError(f"Failed to read {path}: {e}") from e

    return records


def load_outcomes(root: Union[str, Path]) -> List[OutcomeEntry]:
    """Load all outcome entries in file order.

    Returns:
        List of entries (empty if the log doesn't exist)
    """
    return _load_records(get_outcomes_path(root), OutcomeEntry)


def load_principle_changes(root: Union[str, Path]) -> List[PrincipleChange]:
    """Load all principle-change records in file order."""
    return _load_records(get_principles_history_path(root), PrincipleChange)
