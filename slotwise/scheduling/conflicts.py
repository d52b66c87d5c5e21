"""Overlap Detection Service

Detects scheduling conflicts between a candidate interval and a
provider's existing appointments. Only blocking statuses occupy the
calendar: completed, cancelled and no-show appointments leave their
time free.
"""

from collections.abc import Iterable
from typing import Protocol

from slotwise.constants import AppointmentStatus
from slotwise.models import Appointment, Interval


class AppointmentReader(Protocol):
    """Read side of the store needed for conflict checks."""

    def query_appointments(
        self,
        provider_id: str,
        statuses: Iterable[AppointmentStatus],
        range_start=None,
        range_end=None,
        exclude_id: str | None = None,
    ) -> list[Appointment]: ...


def is_conflicting(candidate: Interval, appointments: Iterable[Appointment]) -> bool:
    """Shared overlap predicate for already-fetched appointments.

    Both the conflict detector and the slot generator go through this
    function, so what is offered is exactly what will be accepted.
    """
    return any(
        appt.status in AppointmentStatus.blocking() and candidate.overlaps(appt.interval)
        for appt in appointments
    )


def find_conflicts(
    store: AppointmentReader,
    provider_id: str,
    candidate: Interval,
    exclude_appointment_id: str | None = None,
) -> list[Appointment]:
    """Return the provider's blocking appointments overlapping candidate.

    Args:
        store: Appointment store
        provider_id: Provider whose calendar is checked (validated by caller)
        candidate: Interval to test
        exclude_appointment_id: Appointment to ignore (rescheduling itself)

    Returns:
        Overlapping appointments, ordered by start time
    """
    appointments = store.query_appointments(
        provider_id,
        AppointmentStatus.blocking(),
        range_start=candidate.start,
        range_end=candidate.end,
        exclude_id=exclude_appointment_id,
    )
    return [
        appt
        for appt in appointments
        if appt.id != exclude_appointment_id and is_conflicting(candidate, [appt])
    ]


def has_conflict(
    store: AppointmentReader,
    provider_id: str,
    candidate: Interval,
    exclude_appointment_id: str | None = None,
) -> bool:
    """True if candidate overlaps any blocking appointment of the provider."""
    return bool(find_conflicts(store, provider_id, candidate, exclude_appointment_id))
