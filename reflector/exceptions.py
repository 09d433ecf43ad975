"""Custom exception classes for Reflector."""

from typing import Iterable


class ReflectorError(Exception):
    """Base class for all errors raised by reflector operations."""


class TimeSpecError(ReflectorError, ValueError):
    """Raised when an HH:MM time designation cannot be parsed."""


class InvalidTimeFormatError(TimeSpecError):
    def __init__(self, value: str):
        super().__init__(f'Invalid time format: "{value}" (expected HH:MM)')
        self.value = value


class InvalidHourError(TimeSpecError):
    def __init__(self, hour: int):
        super().__init__(f"Invalid hour: {hour} (expected 0-23)")
        self.hour = hour


class InvalidMinuteError(TimeSpecError):
    def __init__(self, minute: int):
        super().__init__(f"Invalid minute: {minute} (expected 0-59)")
        self.minute = minute


class InvalidTimezoneError(ReflectorError, ValueError):
    def __init__(self, timezone: str):
        super().__init__(f'Unknown timezone: "{timezone}"')
        self.timezone = timezone


class EntryValidationError(ReflectorError, ValueError):
    """Raised when raw log input cannot be turned into a record."""


class MissingTaskError(EntryValidationError):
    def __init__(self):
        super().__init__("task is required and must be a non-empty string")


class MissingPrincipleError(EntryValidationError):
    def __init__(self):
        super().__init__("principle is required and must be a non-empty string")


class _ChoiceError(EntryValidationError):
    """Rejected value from a closed set. The message lists the valid choices."""

    field_name = "value"

    def __init__(self, value, choices: Iterable[str]):
        self.value = value
        self.choices = list(choices)
        got = "" if value is None else value
        super().__init__(f'{self.field_name} must be one of: {", ".join(self.choices)} (got: "{got}")')


class InvalidQualityError(_ChoiceError):
    field_name = "quality"


class InvalidActionError(_ChoiceError):
    field_name = "action"


class InvalidTimestampError(EntryValidationError):
    def __init__(self, value):
        super().__init__(f'Invalid timestamp: "{value}" (expected ISO 8601)')
        self.value = value


class InvalidPrincipleCandidateError(EntryValidationError):
    def __init__(self, value):
        super().__init__(f'principle candidate flag must be true or false (got: "{value}")')
        self.value = value


class PromptUnavailableError(ReflectorError):
    """Raised when a named prompt text cannot be loaded."""

    def __init__(self, name: str, reason: str = ""):
        message = f"Prompt unavailable: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.name = name


class StorageError(ReflectorError, RuntimeError):
    """Raised when an underlying filesystem operation fails."""
