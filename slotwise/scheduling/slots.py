"""Slot Generation Service

Generates discrete bookable start times for a provider over a date range,
considering:
- Working hours (start hour, end hour, slot length)
- Weekends (never offered)
- Existing blocking appointments
"""

import sqlite3
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta

from slotwise.constants import AppointmentStatus
from slotwise.errors import OperationFailedError
from slotwise.models import AvailabilityWindow, Interval, WorkingHours, normalize_datetime
from slotwise.scheduling.conflicts import AppointmentReader, is_conflicting

SATURDAY = 5


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return normalize_datetime(value).date()
    return value


class SlotSequence:
    """Lazy, restartable sequence of free slot start times.

    Each iteration pass fetches the provider's appointments once and then
    walks the calendar; consuming a prefix only costs what was iterated.
    Holds no state between passes, so two passes over an unchanged
    calendar yield identical output.
    """

    def __init__(
        self,
        store: AppointmentReader,
        provider_id: str,
        range_start: date | datetime,
        range_end: date | datetime,
        working_hours: WorkingHours | None = None,
    ):
        self.store = store
        self.provider_id = provider_id
        self.first_day = _as_date(range_start)
        self.last_day = _as_date(range_end)
        self.working_hours = working_hours or WorkingHours()

    def __iter__(self) -> Iterator[datetime]:
        return self._generate()

    def __repr__(self) -> str:
        return (
            f"SlotSequence(provider_id={self.provider_id!r}, "
            f"{self.first_day.isoformat()}..{self.last_day.isoformat()})"
        )

    def windows(self) -> Iterator[AvailabilityWindow]:
        """Iterate the same slots as AvailabilityWindow values."""
        duration = self.working_hours.slot_duration
        for start in self:
            yield AvailabilityWindow(
                provider_id=self.provider_id, start=start, end=start + duration
            )

    def _generate(self) -> Iterator[datetime]:
        if self.first_day > self.last_day:
            return

        range_start = datetime.combine(self.first_day, time.min)
        range_end = datetime.combine(self.last_day + timedelta(days=1), time.min)
        try:
            appointments = self.store.query_appointments(
                self.provider_id,
                AppointmentStatus.blocking(),
                range_start=range_start,
                range_end=range_end,
            )
        except sqlite3.Error as e:
            raise OperationFailedError(
                f"Could not read appointments of {self.provider_id}: {e}"
            ) from e

        hours = self.working_hours
        duration = hours.slot_duration
        day = self.first_day

        while day <= self.last_day:
            if day.weekday() < SATURDAY:
                midnight = datetime.combine(day, time.min)
                slot_start = midnight + timedelta(hours=hours.start_hour)
                day_end = midnight + timedelta(hours=hours.end_hour)

                # Only whole slots; a trailing partial slot is dropped
                while slot_start + duration <= day_end:
                    candidate = Interval(start=slot_start, end=slot_start + duration)
                    if not is_conflicting(candidate, appointments):
                        yield slot_start
                    slot_start += duration

            day += timedelta(days=1)


def generate_slots(
    store: AppointmentReader,
    provider_id: str,
    range_start: date | datetime,
    range_end: date | datetime,
    working_hours: WorkingHours | None = None,
) -> SlotSequence:
    """Free slot start times for a provider, ascending.

    Args:
        store: Appointment store
        provider_id: Provider whose calendar is read
        range_start: First calendar day (inclusive)
        range_end: Last calendar day (inclusive)
        working_hours: Daily window; defaults to 9-17 with 30-minute slots

    Returns:
        SlotSequence; empty when range_start is after range_end

    Example:
        >>> slots = generate_slots(db, "party_ab12", date(2026, 1, 5), date(2026, 1, 5))
        >>> [s.strftime("%H:%M") for s in slots][:2]
        ['09:00', '09:30']
    """
    return SlotSequence(store, provider_id, range_start, range_end, working_hours)
