"""Typed failures raised by the scheduling engine.

Every error the engine surfaces to callers derives from SchedulingError,
so API layers can map the whole family in one place.
"""


class SchedulingError(Exception):
    """Base class for all scheduling engine failures."""

    pass


class PartyNotFoundError(SchedulingError):
    """Requester or provider id does not resolve in the party directory."""

    def __init__(self, party_id: str, role: str = "party"):
        self.party_id = party_id
        self.role = role
        super().__init__(f"{role.capitalize()} not found: {party_id}")


class InvalidIntervalError(SchedulingError):
    """Start is not strictly before end, or the time input is malformed."""

    pass


class SlotUnavailableError(SchedulingError):
    """The requested interval overlaps an existing booking for the provider."""

    def __init__(self, provider_id: str, conflicting_ids: list[str] | None = None):
        self.provider_id = provider_id
        self.conflicting_ids = conflicting_ids or []
        super().__init__(f"Selected time slot is not available for {provider_id}")


class InvalidTransitionError(SchedulingError):
    """Status change violates the appointment state machine."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition appointment from '{current}' to '{requested}'")


class AppointmentNotFoundError(SchedulingError):
    """Operation references a nonexistent appointment."""

    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment not found: {appointment_id}")


class UnauthorizedError(SchedulingError):
    """Caller is not a party to the appointment."""

    def __init__(self, party_id: str, appointment_id: str):
        self.party_id = party_id
        self.appointment_id = appointment_id
        super().__init__(
            f"Party {party_id} is not authorized for appointment {appointment_id}"
        )


class OperationFailedError(SchedulingError):
    """Underlying persistence or directory call failed or timed out."""

    pass


class ConfigLoadError(Exception):
    """Error loading or parsing a YAML configuration file."""

    pass


__all__ = [
    "SchedulingError",
    "PartyNotFoundError",
    "InvalidIntervalError",
    "SlotUnavailableError",
    "InvalidTransitionError",
    "AppointmentNotFoundError",
    "UnauthorizedError",
    "OperationFailedError",
    "ConfigLoadError",
]
