"""Enumerations shared across the scheduling engine."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    @classmethod
    def terminal(cls) -> frozenset["AppointmentStatus"]:
        """Statuses from which no further transition is permitted."""
        return frozenset({cls.COMPLETED, cls.CANCELLED, cls.NO_SHOW})

    @classmethod
    def blocking(cls) -> tuple["AppointmentStatus", ...]:
        """Statuses that occupy a provider's calendar."""
        return (cls.SCHEDULED,)

    @property
    def is_terminal(self) -> bool:
        return self in self.terminal()


class PartyRole(str, Enum):
    """Role a party plays in an appointment."""

    REQUESTER = "requester"
    PROVIDER = "provider"


class LifecycleEvent(str, Enum):
    """Events that fan out into notification intents."""

    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    REMINDER = "reminder"

    @classmethod
    def for_status(cls, status: AppointmentStatus) -> "LifecycleEvent":
        """Map a terminal status to the event announcing it."""
        mapping = {
            AppointmentStatus.COMPLETED: cls.COMPLETED,
            AppointmentStatus.CANCELLED: cls.CANCELLED,
            AppointmentStatus.NO_SHOW: cls.NO_SHOW,
        }
        try:
            return mapping[status]
        except KeyError:
            raise ValueError(f"No lifecycle event for status '{status.value}'") from None
