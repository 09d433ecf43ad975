"""Workspace directory and file layout."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Tuple, Union

REFLECTOR_DIR = "memory/reflector"
OUTCOMES_FILE = f"{REFLECTOR_DIR}/outcomes.jsonl"
PRINCIPLES_HISTORY_FILE = f"{REFLECTOR_DIR}/principles-history.jsonl"
PRINCIPLES_FILE = "PRINCIPLES.md"

# Default file content, or a callable that produces it when the file is written.
FileContent = Union[str, Callable[[], str]]


def _get_templates_dir() -> Path:
    """Get path to bundled file templates."""
    return Path(__file__).parent.parent / "templates"


def principles_template() -> str:
    """Return the starter PRINCIPLES.md content.

    This is a framework for building principles, not the principles
    themselves. Each agent fills it in from its own outcomes.
    """
    return (_get_templates_dir() / "PRINCIPLES.md").read_text(encoding="utf-8")


def _check_relative(rel: str) -> None:
    path = PurePosixPath(rel)
    if not rel or path.is_absolute() or ".." in path.parts:
        raise ValueError(f"Layout paths must be relative to the workspace root: {rel!r}")


@dataclass(frozen=True)
class WorkspaceLayout:
    """Required directories and (path, default content) files, relative to the root."""

    directories: Tuple[str, ...]
    files: Tuple[Tuple[str, FileContent], ...]

    def __post_init__(self):
        for rel in self.directories:
            _check_relative(rel)
        for rel, _ in self.files:
            _check_relative(rel)


DEFAULT_LAYOUT = WorkspaceLayout(
    directories=(
        "memory",
        REFLECTOR_DIR,
        f"{REFLECTOR_DIR}/weekly-summaries",
    ),
    files=(
        (PRINCIPLES_FILE, principles_template),
        (OUTCOMES_FILE, ""),
        (PRINCIPLES_HISTORY_FILE, ""),
    ),
)
