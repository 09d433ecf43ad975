"""Pydantic models for outcome and principle-change records."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import (
    InvalidPrincipleCandidateError,
    InvalidActionError,
    InvalidQualityError,
    InvalidTimestampError,
    MissingPrincipleError,
    MissingTaskError,
)


class OutcomeQuality(str, Enum):
    """How the human responded to a completed task."""

    CORRECTION = "correction"  # corrected or disagreed with the output
    EDIT = "edit"  # modified the work before using it
    PRAISE = "praise"  # explicit positive feedback
    SILENCE = "silence"  # an expected response never came
    UNKNOWN = "unknown"  # ambiguous signal


class PrincipleAction(str, Enum):
    ADD = "add"
    MODIFY = "modify"
    RETIRE = "retire"


QUALITY_TYPES = tuple(q.value for q in OutcomeQuality)
PRINCIPLE_ACTIONS = tuple(a.value for a in PrincipleAction)

TimestampInput = Union[datetime, str, None]


def _parse_timestamp(value) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class LogRecord(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    timestamp: datetime = Field(..., description="When the record was created (timezone-aware)")

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        """Parse ISO format strings and treat naive values as UTC."""
        if isinstance(v, (str, datetime)):
            return _parse_timestamp(v)
        return v

    def to_json_dict(self) -> dict:
        """Serialize using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True)


class OutcomeEntry(LogRecord):
    """One line of outcomes.jsonl."""

    task: str = Field(..., min_length=1, description="What was done")
    channel: Optional[str] = Field(default=None, description="Communication channel")
    output_quality: OutcomeQuality = Field(..., alias="outputQuality")
    delta: Optional[str] = Field(default=None, description="What changed between output and final result")
    lesson: Optional[str] = Field(default=None, description="What this teaches about effectiveness")
    principle_candidate: bool = Field(default=False, alias="principleCandidate")


class PrincipleChange(LogRecord):
    """One line of principles-history.jsonl."""

    action: PrincipleAction
    principle: str = Field(..., min_length=1, description="Principle name as it appears in PRINCIPLES.md")
    reason: Optional[str] = None
    evidence: Optional[str] = None


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def _required_text(value, error: Exception) -> str:
    if not isinstance(value, str) or not value.strip():
        raise error
    return value.strip()


def _coerce_timestamp(value: TimestampInput) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if not isinstance(value, (str, datetime)):
        raise InvalidTimestampError(value)
    try:
        return _parse_timestamp(value)
    except ValueError as e:
        raise InvalidTimestampError(value) from e


def build_entry(
    task,
    quality,
    *,
    channel: Optional[str] = None,
    delta: Optional[str] = None,
    lesson: Optional[str] = None,
    timestamp: TimestampInput = None,
    principle_candidate: Optional[bool] = None,
) -> OutcomeEntry:
    """Validate raw input and build an outcome entry.

    Pure function: performs no I/O.

    Args:
        task: Description of the completed task
        quality: One of correction, edit, praise, silence, unknown
        channel: Channel the task came from
        delta: What changed between output and final result
        lesson: Insight about effectiveness
        timestamp: When the outcome happened (defaults to now, UTC)
        principle_candidate: Override for the principle-candidate flag.
            When None, only corrections are flagged.

    Returns:
        Validated OutcomeEntry

    Raises:
        MissingTaskError: If task is missing or blank
        InvalidQualityError: If quality is not a known value
        InvalidPrincipleCandidateError: If the override is not a bool
        InvalidTimestampError: If timestamp cannot be parsed
    """
    task = _required_text(task, MissingTaskError())

    try:
        output_quality = OutcomeQuality(quality)
    except ValueError:
        raise InvalidQualityError(quality, QUALITY_TYPES) from None

    if principle_candidate is None:
        principle_candidate = output_quality is OutcomeQuality.CORRECTION
    elif not isinstance(principle_candidate, bool):
        raise InvalidPrincipleCandidateError(principle_candidate)

    return OutcomeEntry(
        timestamp=_coerce_timestamp(timestamp),
        task=task,
        channel=_optional_text(channel),
        output_quality=output_quality,
        delta=_optional_text(delta),
        lesson=_optional_text(lesson),
        principle_candidate=principle_candidate,
    )


def build_principle_change(
    action,
    principle,
    *,
    reason: Optional[str] = None,
    evidence: Optional[str] = None,
    timestamp: TimestampInput = None,
) -> PrincipleChange:
    """Validate raw input and build a principle-change record.

    Raises:
        MissingPrincipleError: If principle is missing or blank
        InvalidActionError: If action is not add, modify or retire
        InvalidTimestampError: If timestamp cannot be parsed
    """
    principle = _required_text(principle, MissingPrincipleError())

    try:
        principle_action = PrincipleAction(action)
    except ValueError:
        raise InvalidActionError(action, PRINCIPLE_ACTIONS) from None

    return PrincipleChange(
        timestamp=_coerce_timestamp(timestamp),
        action=principle_action,
        principle=principle,
        reason=_optional_text(reason),
        evidence=_optional_text(evidence),
    )
