"""Half-open time interval value type.

All engine time reasoning goes through Interval so that the conflict
detector and the slot generator share one overlap predicate.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from pydantic import BaseModel, model_validator

from slotwise.config import REFERENCE_TIMEZONE
from slotwise.errors import InvalidIntervalError


def normalize_datetime(value: datetime) -> datetime:
    """Bring a datetime into the naive reference-timezone representation.

    Aware datetimes are converted to REFERENCE_TIMEZONE and stripped of
    tzinfo; naive datetimes are assumed to already be in it.
    """
    if value.tzinfo is not None:
        value = value.astimezone(ZoneInfo(REFERENCE_TIMEZONE)).replace(tzinfo=None)
    return value


def reference_now() -> datetime:
    """Current wall-clock time in the naive reference-timezone representation."""
    return datetime.now(ZoneInfo(REFERENCE_TIMEZONE)).replace(tzinfo=None)


class Interval(BaseModel):
    """A half-open range [start, end)."""

    start: datetime
    end: datetime

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_order(self) -> "Interval":
        """Reject empty or inverted ranges."""
        if self.start >= self.end:
            raise ValueError(f"Interval start {self.start} must be before end {self.end}")
        return self

    @classmethod
    def from_duration(cls, start: datetime, minutes: int) -> "Interval":
        """Build [start, start + minutes) for duration-based callers."""
        return resolve_interval(start, timedelta(minutes=minutes))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        """True if the ranges share any instant. Touching ranges do not."""
        return self.start < other.end and other.start < self.end


def resolve_interval(
    start: datetime,
    end_or_duration: datetime | timedelta | int,
) -> Interval:
    """Unify the explicit-end and duration representations into an Interval.

    Args:
        start: Interval start
        end_or_duration: Explicit end datetime, a timedelta, or whole minutes

    Returns:
        Normalized Interval

    Raises:
        InvalidIntervalError: If the input is malformed or start >= end
    """
    if not isinstance(start, datetime):
        raise InvalidIntervalError(f"Start must be a datetime, got {type(start).__name__}")

    start = normalize_datetime(start)

    if isinstance(end_or_duration, datetime):
        end = normalize_datetime(end_or_duration)
    elif isinstance(end_or_duration, timedelta):
        end = start + end_or_duration
    elif isinstance(end_or_duration, int) and not isinstance(end_or_duration, bool):
        end = start + timedelta(minutes=end_or_duration)
    else:
        raise InvalidIntervalError(
            f"Cannot derive an end time from {type(end_or_duration).__name__}"
        )

    if start >= end:
        raise InvalidIntervalError(f"End time must be after start time ({start} >= {end})")

    return Interval(start=start, end=end)
