"""HH:MM time parsing and cron schedule derivation."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo

from cronsim import CronSim

from .exceptions import InvalidHourError, InvalidMinuteError, InvalidTimeFormatError

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


# Day-of-week field for weekly schedules (0 = Sunday)
WEEKLY_DAY_OF_WEEK = 0


def parse_time(value: str) -> Tuple[int, int]:
    """Validate and parse an HH:MM time string.

    Args:
        value: Time designation such as "03:30" or "0:00"

    Returns:
        (hour, minute) tuple

    Raises:
        InvalidTimeFormatError: If the string is not H:MM or HH:MM
        InvalidHourError: If hour is outside 0-23
        InvalidMinuteError: If minute is outside 0-59
    """
    match = _TIME_RE.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeFormatError(value)

    hour = int(match.group(1))
    minute = int(match.group(2))

    if not 0 <= hour <= 23:
        raise InvalidHourError(hour)
    if not 0 <= minute <= 59:
        raise InvalidMinuteError(minute)

    return hour, minute


def time_to_schedule(time: str, frequency: Union[Frequency, str]) -> str:
    """Convert an HH:MM time and frequency into a five-field cron expression.

    Daily schedules fire every day; weekly schedules fire on Sunday.

    Raises:
        TimeSpecError: If the time string is invalid
        ValueError: If frequency is not daily or weekly
    """
    frequency = Frequency(frequency)
    hour, minute = parse_time(time)
    if frequency is Frequency.WEEKLY:
        return f"{minute} {hour} * * {WEEKLY_DAY_OF_WEEK}"
    return f"{minute} {hour} * * *"


def next_fire_time(schedule: str, tz_name: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Compute the next time a cron expression fires in the given timezone.

    Args:
        schedule: Five-field cron expression
        tz_name: IANA timezone the expression is evaluated in
        now: Reference instant (defaults to the current time)

    Returns:
        Next fire time in UTC, or None if the expression never fires again
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    tz = ZoneInfo(tz_name)
    it = CronSim(schedule, now.astimezone(tz))
    try:
        return next(it).astimezone(timezone.utc)
    except StopIteration:
        return None
