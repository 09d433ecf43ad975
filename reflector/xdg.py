"""XDG Base Directory lookup for the user config file."""

import os
from pathlib import Path


def get_xdg_config_path(filename: str) -> Path:
    """Path to a reflector config file.

    Uses $XDG_CONFIG_HOME/reflector/{filename}, or ~/.config/reflector/{filename}
    when XDG_CONFIG_HOME is unset. The file may not exist.
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(xdg_config) / "reflector" / filename
