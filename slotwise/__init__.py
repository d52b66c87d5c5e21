"""Slotwise - appointment scheduling and availability engine.

Books, reschedules and cancels appointments between a requester and a
provider, rejects double bookings, and lists free slots under
working-hour constraints.
"""

from slotwise.constants import AppointmentStatus, LifecycleEvent, PartyRole
from slotwise.directory import InMemoryPartyDirectory, PartyDirectory
from slotwise.errors import (
    AppointmentNotFoundError,
    InvalidIntervalError,
    InvalidTransitionError,
    OperationFailedError,
    PartyNotFoundError,
    SchedulingError,
    SlotUnavailableError,
    UnauthorizedError,
)
from slotwise.models import (
    Appointment,
    AppointmentPage,
    AvailabilityWindow,
    Interval,
    NotificationIntent,
    Party,
    ProviderAvailability,
    WorkingHours,
)
from slotwise.scheduling import AppointmentManager, generate_slots, has_conflict
from slotwise.storage import AppointmentDB, get_store

__all__ = [
    # Engine
    "AppointmentManager",
    "generate_slots",
    "has_conflict",
    # Storage
    "AppointmentDB",
    "get_store",
    # Directory
    "InMemoryPartyDirectory",
    "PartyDirectory",
    # Models
    "Appointment",
    "AppointmentPage",
    "AvailabilityWindow",
    "Interval",
    "NotificationIntent",
    "Party",
    "ProviderAvailability",
    "WorkingHours",
    # Enums
    "AppointmentStatus",
    "LifecycleEvent",
    "PartyRole",
    # Errors
    "SchedulingError",
    "PartyNotFoundError",
    "InvalidIntervalError",
    "SlotUnavailableError",
    "InvalidTransitionError",
    "AppointmentNotFoundError",
    "UnauthorizedError",
    "OperationFailedError",
]
