"""Reflector configuration management."""

import json
import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field

from .xdg import get_xdg_config_path

logger = logging.getLogger(__name__)

DEFAULT_DAILY_TIME = "03:30"
DEFAULT_WEEKLY_TIME = "03:00"
FALLBACK_TIMEZONE = "UTC"


class InitConfig(BaseModel):
    """Inputs for a single workspace initialization call."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default_factory=Path.cwd)
    dry_run: bool = False
    skip_schedule: bool = False
    timezone: Optional[str] = None
    daily_time: str = DEFAULT_DAILY_TIME
    weekly_time: str = DEFAULT_WEEKLY_TIME


class Config(BaseModel):
    """User-level defaults read from config.json."""

    model_config = ConfigDict(
        extra="allow",
        str_strip_whitespace=True,
    )

    timezone: Optional[str] = None
    daily_time: str = DEFAULT_DAILY_TIME
    weekly_time: str = DEFAULT_WEEKLY_TIME

    def to_init_config(self, **overrides) -> InitConfig:
        """Build an InitConfig from these defaults.

        Overrides set to None are ignored so unset CLI flags fall through
        to the config file values.
        """
        values = {
            "timezone": self.timezone,
            "daily_time": self.daily_time,
            "weekly_time": self.weekly_time,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return InitConfig(**values)


def get_config_path() -> Path:
    return get_xdg_config_path("config.json")


def load_config(path: Optional[Path] = None) -> Config:
    """Load Reflector configuration from JSON file.

    Args:
        path: Path to config.json file. If None, uses default path

    Returns:
        Config object with loaded settings. Returns default config if file doesn't exist.
    """
    if path is None:
        path = get_config_path()

    if not path.exists():
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Config.model_validate(data)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return Config()
    except Exception as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return Config()


def is_valid_timezone(name: str) -> bool:
    """Check whether name is a known IANA timezone."""
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def detect_timezone() -> Optional[str]:
    """Detect the system's IANA timezone name.

    Checks $TZ, then the /etc/localtime symlink, then /etc/timezone.

    Returns:
        Timezone name, or None if it cannot be determined
    """
    tz_env = os.environ.get("TZ", "").lstrip(":")
    if is_valid_timezone(tz_env):
        return tz_env

    localtime = Path("/etc/localtime")
    try:
        if localtime.is_symlink():
            target = str(localtime.resolve())
            if "zoneinfo/" in target:
                name = target.split("zoneinfo/", 1)[1]
                if is_valid_timezone(name):
                    return name
    except OSError as e:
        logger.debug("Could not resolve %s: %s", localtime, e)

    try:
        name = Path("/etc/timezone").read_text(encoding="utf-8").strip()
        if is_valid_timezone(name):
            return name
    except OSError as e:
        logger.debug("Could not read /etc/timezone: %s", e)

    return None


def resolve_timezone(explicit: Optional[str] = None) -> str:
    """Return the explicit timezone, else the detected one, else UTC."""
    if explicit:
        return explicit
    return detect_timezone() or FALLBACK_TIMEZONE
