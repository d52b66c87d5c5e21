"""Appointment Lifecycle Manager

Owns creation, rescheduling and status changes of appointments.

Flow for every mutation:
1. Resolve/authorize the parties involved
2. Open a store transaction
3. Re-read current state, check the state machine and conflicts
4. Write and commit
5. After commit, fan out notification intents (failures only logged)
"""

import logging
import sqlite3
from datetime import date, datetime, timedelta

from slotwise.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, REFERENCE_TIMEZONE, REMINDER_LEAD_HOURS
from slotwise.constants import AppointmentStatus, LifecycleEvent, PartyRole
from slotwise.directory import PartyDirectory
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
    NotificationIntent,
    Party,
    ProviderAvailability,
    WorkingHours,
    normalize_datetime,
    reference_now,
    resolve_interval,
)
from slotwise.notifications import NotificationDispatcher, build_intents, dispatch_intents
from slotwise.scheduling.conflicts import find_conflicts
from slotwise.scheduling.slots import SlotSequence, generate_slots
from slotwise.scheduling.transitions import ensure_transition
from slotwise.storage import AppointmentDB, generate_id

logger = logging.getLogger(__name__)

# Marks "argument not given" where None is a meaningful value
_UNSET = object()


class AppointmentManager:
    """Booking, rescheduling and status changes for appointments.

    Args:
        store: Transactional appointment store
        directory: Party lookup; defaults to the store's parties table
        dispatcher: Notification delivery; None disables notifications
        working_hours: Default working hours for slot generation
    """

    def __init__(
        self,
        store: AppointmentDB,
        directory: PartyDirectory | None = None,
        dispatcher: NotificationDispatcher | None = None,
        working_hours: WorkingHours | None = None,
    ):
        self.store = store
        self.directory = directory or store
        self.dispatcher = dispatcher
        self.working_hours = working_hours or WorkingHours()

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(
        self,
        requester_id: str,
        provider_id: str,
        start_time: datetime,
        end_or_duration: datetime | timedelta | int,
        notes: str | None = None,
        linked_resource_id: str | None = None,
    ) -> Appointment:
        """Book a provider's time for a requester.

        Args:
            requester_id: Booking party
            provider_id: Party whose calendar is booked
            start_time: Appointment start
            end_or_duration: End datetime, timedelta, or whole minutes
            notes: Free text carried unchanged
            linked_resource_id: External resource reference carried unchanged

        Returns:
            The new scheduled appointment

        Raises:
            PartyNotFoundError: requester or provider does not resolve
            InvalidIntervalError: start is not before end
            SlotUnavailableError: interval overlaps a booking of the provider
            OperationFailedError: store or directory failure (nothing written)
        """
        requester = self._resolve_party(requester_id, PartyRole.REQUESTER)
        provider = self._resolve_party(provider_id, PartyRole.PROVIDER)
        interval = resolve_interval(start_time, end_or_duration)

        now = reference_now()
        appointment = Appointment(
            id=generate_id("appt"),
            requester_id=requester.id,
            provider_id=provider.id,
            start_time=interval.start,
            end_time=interval.end,
            notes=notes,
            linked_resource_id=linked_resource_id,
            created_at=now,
            updated_at=now,
        )

        try:
            with self.store.transaction():
                conflicts = find_conflicts(self.store, provider.id, interval)
                if conflicts:
                    raise SlotUnavailableError(provider.id, [c.id for c in conflicts])
                self.store.insert_appointment(appointment)
        except sqlite3.IntegrityError as e:
            raise SlotUnavailableError(provider.id) from e
        except sqlite3.Error as e:
            raise OperationFailedError(f"Could not create appointment: {e}") from e

        logger.info(
            f"Appointment {appointment.id} created: provider={provider.id} "
            f"requester={requester.id} {interval.start.isoformat()}-{interval.end.isoformat()}"
        )
        self._notify(LifecycleEvent.CREATED, appointment, requester, provider)
        return appointment

    def reschedule(
        self,
        appointment_id: str,
        new_start: datetime,
        new_end_or_duration: datetime | timedelta | int,
        requested_by: str,
    ) -> Appointment:
        """Move an appointment to a new interval.

        Moving to the interval it already has is a no-op: nothing is
        written and nobody is notified.

        Raises:
            AppointmentNotFoundError: appointment does not exist
            UnauthorizedError: requested_by is not a party to it
            InvalidTransitionError: appointment is in a terminal status
            InvalidIntervalError: new start is not before new end
            SlotUnavailableError: new interval overlaps another booking
            OperationFailedError: store failure (nothing written)
        """
        return self.modify(
            appointment_id,
            requested_by,
            new_start=new_start,
            new_end_or_duration=new_end_or_duration,
        )

    def change_status(
        self,
        appointment_id: str,
        new_status: AppointmentStatus | str,
        requested_by: str,
    ) -> Appointment:
        """Move a scheduled appointment into a terminal status.

        Rescheduling is the only scheduled -> scheduled path, so asking for
        SCHEDULED here is rejected like any other invalid transition.

        Raises:
            AppointmentNotFoundError, UnauthorizedError,
            InvalidTransitionError, OperationFailedError
        """
        try:
            with self.store.transaction():
                current = self._load_authorized(appointment_id, requested_by)
                try:
                    new_status = AppointmentStatus(new_status)
                except ValueError:
                    raise InvalidTransitionError(current.status.value, str(new_status)) from None
                if new_status is AppointmentStatus.SCHEDULED:
                    raise InvalidTransitionError(current.status.value, new_status.value)
                ensure_transition(current.status, new_status)

                updated = current.model_copy(
                    update={"status": new_status, "updated_at": reference_now()}
                )
                self.store.update_appointment(updated)
        except sqlite3.Error as e:
            raise OperationFailedError(f"Could not change status of {appointment_id}: {e}") from e

        logger.info(f"Appointment {updated.id} status -> {new_status.value} (by {requested_by})")
        self._notify(LifecycleEvent.for_status(new_status), updated)
        return updated

    def cancel(self, appointment_id: str, requested_by: str) -> Appointment:
        """Cancel an appointment; the record is kept for history."""
        return self.change_status(appointment_id, AppointmentStatus.CANCELLED, requested_by)

    def update_details(
        self,
        appointment_id: str,
        requested_by: str,
        notes=_UNSET,
        linked_resource_id=_UNSET,
    ) -> Appointment:
        """Change notes and/or the linked resource of a scheduled appointment.

        Pass None to clear a field; omit it to leave it unchanged.
        """
        return self.modify(
            appointment_id,
            requested_by,
            notes=notes,
            linked_resource_id=linked_resource_id,
        )

    def modify(
        self,
        appointment_id: str,
        requested_by: str,
        new_start: datetime | None = None,
        new_end_or_duration: datetime | timedelta | int | None = None,
        notes=_UNSET,
        linked_resource_id=_UNSET,
    ) -> Appointment:
        """Reschedule and change details in one transaction.

        Args:
            appointment_id: Appointment to change
            requested_by: Requester or provider of record
            new_start: New start time; None keeps the current interval
            new_end_or_duration: End datetime, timedelta or whole minutes;
                None keeps the current duration
            notes: New notes (None clears, omit to keep)
            linked_resource_id: New linked resource (None clears, omit to keep)

        Returns:
            The stored appointment. When nothing differs from what is
            stored, it is returned as-is without a write or a notification.
            Otherwise a single ``updated`` event is fanned out.

        Raises:
            AppointmentNotFoundError, UnauthorizedError,
            InvalidTransitionError, InvalidIntervalError,
            SlotUnavailableError, OperationFailedError
        """
        if new_start is None and new_end_or_duration is not None:
            raise InvalidIntervalError("A new end or duration needs a new start time")

        interval = None
        if new_start is not None and new_end_or_duration is not None:
            interval = resolve_interval(new_start, new_end_or_duration)

        details = {}
        if notes is not _UNSET:
            details["notes"] = notes
        if linked_resource_id is not _UNSET:
            details["linked_resource_id"] = linked_resource_id

        try:
            with self.store.transaction():
                current = self._load_authorized(appointment_id, requested_by)

                if new_start is not None:
                    ensure_transition(current.status, AppointmentStatus.SCHEDULED)
                    if interval is None:
                        interval = resolve_interval(
                            new_start, current.end_time - current.start_time
                        )
                if details and current.status.is_terminal:
                    raise InvalidTransitionError(current.status.value, current.status.value)

                changes = {k: v for k, v in details.items() if getattr(current, k) != v}
                if interval is not None and interval != current.interval:
                    conflicts = find_conflicts(
                        self.store,
                        current.provider_id,
                        interval,
                        exclude_appointment_id=current.id,
                    )
                    if conflicts:
                        raise SlotUnavailableError(
                            current.provider_id, [c.id for c in conflicts]
                        )
                    changes["start_time"] = interval.start
                    changes["end_time"] = interval.end

                if not changes:
                    return current

                updated = current.model_copy(update={**changes, "updated_at": reference_now()})
                self.store.update_appointment(updated)
        except sqlite3.IntegrityError as e:
            raise SlotUnavailableError(current.provider_id) from e
        except sqlite3.Error as e:
            raise OperationFailedError(f"Could not update {appointment_id}: {e}") from e

        if "start_time" in changes:
            logger.info(
                f"Appointment {updated.id} rescheduled to "
                f"{interval.start.isoformat()}-{interval.end.isoformat()}"
            )
        self._notify(LifecycleEvent.UPDATED, updated)
        return updated

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, appointment_id: str, requested_by: str) -> Appointment:
        """Fetch one appointment on behalf of one of its parties."""
        try:
            return self._load_authorized(appointment_id, requested_by)
        except sqlite3.Error as e:
            raise OperationFailedError(f"Could not load {appointment_id}: {e}") from e

    def list_appointments(
        self,
        party_id: str,
        role: PartyRole | str | None = None,
        status: AppointmentStatus | str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> AppointmentPage:
        """Appointments the party takes part in, ordered by start time.

        Args:
            party_id: Requester or provider
            role: Narrow to appointments where the party has this role
            status: Only this status
            date_from: Earliest start time (inclusive)
            date_to: Latest start time (inclusive)
            page: 1-based page number
            page_size: Items per page, at most MAX_PAGE_SIZE

        Raises:
            ValueError: If page or page_size is out of range
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        try:
            items, total = self.store.list_for_party(
                party_id,
                role=role,
                status=status,
                date_from=normalize_datetime(date_from) if date_from else None,
                date_to=normalize_datetime(date_to) if date_to else None,
                limit=page_size,
                offset=(page - 1) * page_size,
            )
        except sqlite3.Error as e:
            raise OperationFailedError(f"Could not list appointments: {e}") from e

        return AppointmentPage(items=items, total=total, page=page, page_size=page_size)

    def generate_slots(
        self,
        provider_id: str,
        range_start: date | datetime,
        range_end: date | datetime,
        working_hours: WorkingHours | None = None,
    ) -> SlotSequence:
        """Free slot start times for a provider (read-only, advisory)."""
        return generate_slots(
            self.store,
            provider_id,
            range_start,
            range_end,
            working_hours or self.working_hours,
        )

    def availability(
        self,
        provider_id: str,
        range_start: date | datetime,
        range_end: date | datetime,
        working_hours: WorkingHours | None = None,
    ) -> ProviderAvailability:
        """Validated, materialized slot listing for one provider.

        Raises:
            PartyNotFoundError: provider does not resolve
            OperationFailedError: store or directory failure
        """
        windows = self.availability_windows(provider_id, range_start, range_end, working_hours)
        return ProviderAvailability(
            provider_id=provider_id,
            slots=[w.start for w in windows],
            timezone=REFERENCE_TIMEZONE,
        )

    def availability_windows(
        self,
        provider_id: str,
        range_start: date | datetime,
        range_end: date | datetime,
        working_hours: WorkingHours | None = None,
    ) -> list[AvailabilityWindow]:
        """Free slots for a validated provider, each with its end time."""
        provider = self._resolve_party(provider_id, PartyRole.PROVIDER)
        return list(
            self.generate_slots(provider.id, range_start, range_end, working_hours).windows()
        )

    # =========================================================================
    # Reminders
    # =========================================================================

    def send_reminders(
        self,
        now: datetime | None = None,
        lead_hours: float = REMINDER_LEAD_HOURS,
    ) -> list[NotificationIntent]:
        """Fan out reminders for scheduled appointments starting soon.

        Covers appointments with now < start_time <= now + lead_hours.
        Nothing records that a reminder went out, so overlapping runs
        remind twice.

        Returns:
            All intents produced (dispatched if a dispatcher is set)
        """
        now = normalize_datetime(now) if now else reference_now()
        until = now + timedelta(hours=lead_hours)

        try:
            upcoming = self.store.list_starting_between(
                now, until, AppointmentStatus.blocking()
            )
        except sqlite3.Error as e:
            raise OperationFailedError(f"Could not read upcoming appointments: {e}") from e

        intents: list[NotificationIntent] = []
        for appointment in upcoming:
            intents.extend(self._notify(LifecycleEvent.REMINDER, appointment))

        logger.info(f"Reminders: {len(upcoming)} appointment(s), {len(intents)} intent(s)")
        return intents

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve_party(self, party_id: str, role: PartyRole) -> Party:
        """Resolve a party and check it plays the expected role."""
        try:
            party = self.directory.resolve_party(party_id)
        except SchedulingError:
            raise
        except Exception as e:
            raise OperationFailedError(f"Party directory lookup failed for {party_id}: {e}") from e

        if party is None or party.role is not role:
            raise PartyNotFoundError(party_id, role.value)
        return party

    def _lookup_for_notification(self, party_id: str) -> Party | None:
        """Best-effort party lookup; None drops that party's intent."""
        try:
            party = self.directory.resolve_party(party_id)
        except Exception as e:
            logger.warning(f"⚠️ Could not resolve {party_id} for notification: {e}")
            return None
        if party is None:
            logger.warning(f"⚠️ Party {party_id} not found, skipping its notification")
        return party

    def _load_authorized(self, appointment_id: str, requested_by: str) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)
        if not appointment.has_party(requested_by):
            raise UnauthorizedError(requested_by, appointment_id)
        return appointment

    def _notify(
        self,
        event: LifecycleEvent,
        appointment: Appointment,
        requester: Party | None | object = _UNSET,
        provider: Party | None | object = _UNSET,
    ) -> list[NotificationIntent]:
        """Build and dispatch intents; never raises."""
        try:
            if requester is _UNSET:
                requester = self._lookup_for_notification(appointment.requester_id)
            if provider is _UNSET:
                provider = self._lookup_for_notification(appointment.provider_id)
            intents = build_intents(event, appointment, requester, provider)
        except Exception:
            logger.exception(f"Could not build {event.value} notifications for {appointment.id}")
            return []

        dispatch_intents(self.dispatcher, intents)
        return intents
