"""Appointment status state machine."""

from slotwise.constants import AppointmentStatus
from slotwise.errors import InvalidTransitionError

S = AppointmentStatus

# scheduled -> scheduled is a reschedule (time change, same status)
ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    S.SCHEDULED: frozenset({S.SCHEDULED, S.COMPLETED, S.CANCELLED, S.NO_SHOW}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
    S.NO_SHOW: frozenset(),
}


def can_transition(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    return AppointmentStatus(requested) in ALLOWED_TRANSITIONS[AppointmentStatus(current)]


def ensure_transition(current: AppointmentStatus, requested: AppointmentStatus) -> None:
    """Raise InvalidTransitionError unless current -> requested is allowed."""
    if not can_transition(current, requested):
        raise InvalidTransitionError(
            AppointmentStatus(current).value, AppointmentStatus(requested).value
        )
