"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from reflector.exceptions import ReflectorError


def exit_with_error(error: ReflectorError) -> NoReturn:
    """Print a one-line diagnostic to stderr and exit with status 1."""
    message = " ".join(str(error).split())
    Console(stderr=True, no_color=True).print(f"Error: {message}", soft_wrap=True, markup=False, highlight=False)
    raise typer.Exit(1)


def resolve_root(root: Optional[Path]) -> Path:
    """Workspace root from --root, defaulting to the current directory."""
    return (root or Path.cwd()).expanduser()
