"""Pydantic models for appointments, parties and derived scheduling values."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field, model_validator

from slotwise.config import (
    DEFAULT_END_HOUR,
    DEFAULT_SLOT_DURATION_MINUTES,
    DEFAULT_START_HOUR,
    REFERENCE_TIMEZONE,
)
from slotwise.constants import AppointmentStatus, LifecycleEvent, PartyRole
from slotwise.models.interval import Interval, reference_now

# =============================================================================
# Persisted records
# =============================================================================


class Appointment(BaseModel):
    """A booking of a provider's time by a requester."""

    id: str
    requester_id: str
    provider_id: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str | None = None
    linked_resource_id: str | None = Field(
        default=None, description="External resource carried through unchanged"
    )
    created_at: datetime = Field(default_factory=reference_now)
    updated_at: datetime = Field(default_factory=reference_now)

    @model_validator(mode="after")
    def validate_times(self) -> "Appointment":
        """An appointment always ends strictly after it starts."""
        if self.start_time >= self.end_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def interval(self) -> Interval:
        return Interval(start=self.start_time, end=self.end_time)

    def has_party(self, party_id: str) -> bool:
        """True if party_id is the requester or the provider of record."""
        return party_id in (self.requester_id, self.provider_id)


class Party(BaseModel):
    """Directory record for a requester or provider (read-only to the engine)."""

    id: str
    name: str
    role: PartyRole
    email: str | None = None
    created_at: datetime = Field(default_factory=reference_now)


# =============================================================================
# Configuration values
# =============================================================================


class WorkingHours(BaseModel):
    """Daily window in which slots are offered."""

    start_hour: int = Field(default=DEFAULT_START_HOUR, ge=0, le=23)
    end_hour: int = Field(default=DEFAULT_END_HOUR, ge=1, le=24)
    slot_duration_minutes: int = Field(default=DEFAULT_SLOT_DURATION_MINUTES, ge=1)

    @model_validator(mode="after")
    def validate_window(self) -> "WorkingHours":
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})"
            )
        return self

    @property
    def slot_duration(self) -> timedelta:
        return timedelta(minutes=self.slot_duration_minutes)


# =============================================================================
# Derived values (never persisted)
# =============================================================================


class AvailabilityWindow(BaseModel):
    """One bookable slot offered for a provider."""

    provider_id: str
    start: datetime
    end: datetime

    model_config = {"frozen": True}


class ProviderAvailability(BaseModel):
    """Free slots for a provider over a date range."""

    provider_id: str
    slots: list[datetime]
    timezone: str = REFERENCE_TIMEZONE


class AppointmentPage(BaseModel):
    """One page of a listing plus the unpaginated total."""

    items: list[Appointment]
    total: int
    page: int
    page_size: int


class NotificationIntent(BaseModel):
    """A notification to be delivered by an external dispatcher."""

    target_party_id: str
    template_kind: str
    event: LifecycleEvent
    context: dict[str, Any] = Field(default_factory=dict)
