"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from reflector.workspace.prompts import DAILY_PROMPT, WEEKLY_PROMPT

STUB_PROMPTS = {
    DAILY_PROMPT: "Reflector daily review (stub)",
    WEEKLY_PROMPT: "Reflector weekly refinement (stub)",
}


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch) -> Path:
    """Point HOME and XDG_CONFIG_HOME at an empty directory so no user config is read."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("REFLECTOR_CHANNEL", raising=False)
    return home


@pytest.fixture
def workspace_root(tmp_path) -> Path:
    """An empty workspace directory."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def stub_prompt_loader():
    """Prompt loader returning fixed text for the two review prompts."""
    return STUB_PROMPTS.__getitem__

