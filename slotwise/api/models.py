"""Request models for the scheduling API."""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field, model_validator

from slotwise.config import DEFAULT_SLOT_DURATION_MINUTES
from slotwise.constants import AppointmentStatus, PartyRole


class CreateParty(BaseModel):
    """Request to register a party in the directory."""

    name: str = Field(min_length=1)
    role: PartyRole
    email: str | None = None


class CreateAppointment(BaseModel):
    """Request to book an appointment.

    Give either end_time or duration_min; with neither, the default slot
    length is used.
    """

    requester_id: str
    provider_id: str
    start_time: datetime
    end_time: datetime | None = None
    duration_min: int | None = Field(default=None, ge=1, le=480)
    notes: str | None = None
    linked_resource_id: str | None = None

    @model_validator(mode="after")
    def validate_end(self) -> "CreateAppointment":
        if self.end_time is not None and self.duration_min is not None:
            raise ValueError("Give end_time or duration_min, not both")
        return self

    def end_or_duration(self) -> datetime | timedelta:
        if self.end_time is not None:
            return self.end_time
        return timedelta(minutes=self.duration_min or DEFAULT_SLOT_DURATION_MINUTES)


class UpdateAppointment(BaseModel):
    """Partial update: reschedule and/or change details."""

    requested_by: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_min: int | None = Field(default=None, ge=1, le=480)
    notes: str | None = None
    linked_resource_id: str | None = None

    @model_validator(mode="after")
    def validate_reschedule(self) -> "UpdateAppointment":
        if self.start_time is None and (self.end_time or self.duration_min):
            raise ValueError("end_time/duration_min require start_time")
        if self.end_time is not None and self.duration_min is not None:
            raise ValueError("Give end_time or duration_min, not both")
        return self

    def end_or_duration(self) -> datetime | timedelta | None:
        """End for the reschedule; None keeps the current length."""
        if self.end_time is not None:
            return self.end_time
        if self.duration_min is not None:
            return timedelta(minutes=self.duration_min)
        return None


class ChangeStatus(BaseModel):
    """Request to move an appointment to a terminal status."""

    status: AppointmentStatus
    requested_by: str
