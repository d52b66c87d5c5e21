"""Data models for the scheduling engine."""

from slotwise.models.appointment import (
    Appointment,
    AppointmentPage,
    AvailabilityWindow,
    NotificationIntent,
    Party,
    ProviderAvailability,
    WorkingHours,
)
from slotwise.models.interval import Interval, normalize_datetime, reference_now, resolve_interval

__all__ = [
    "Appointment",
    "AppointmentPage",
    "AvailabilityWindow",
    "Interval",
    "NotificationIntent",
    "Party",
    "ProviderAvailability",
    "WorkingHours",
    "normalize_datetime",
    "reference_now",
    "resolve_interval",
]
