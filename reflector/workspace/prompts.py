"""Loading of the scheduled review prompts."""

from pathlib import Path
from typing import Callable

from ..exceptions import PromptUnavailableError

DAILY_PROMPT = "daily-review.txt"
WEEKLY_PROMPT = "weekly-refinement.txt"

PromptLoader = Callable[[str], str]


def _get_prompts_dir() -> Path:
    return Path(__file__).parent.parent / "prompts"


def load_prompt(name: str) -> str:
    """Read a bundled prompt by name.

    The text is returned as-is; its contents are never parsed.

    Raises:
        PromptUnavailableError: If the prompt file cannot be read
    """
    prompt_path = _get_prompts_dir() / name
    try:
        return prompt_path.read_text(encoding="utf-8")
    except OSError as e:
        raise PromptUnavailableError(name, e.strerror or str(e)) from e
