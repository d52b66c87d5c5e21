"""Notification Fan-out

Translates a lifecycle event into notification intents for both parties
of an appointment. Pure translation: nothing here delivers anything.
"""

from typing import NamedTuple

from slotwise.constants import LifecycleEvent, PartyRole
from slotwise.models import Appointment, NotificationIntent, Party


class Template(NamedTuple):
    title: str
    requester_message: str
    provider_message: str


TEMPLATES: dict[LifecycleEvent, Template] = {
    LifecycleEvent.CREATED: Template(
        "Appointment Created",
        "New appointment scheduled with {provider} on {date} at {time}",
        "New appointment scheduled with {requester} on {date} at {time}",
    ),
    LifecycleEvent.UPDATED: Template(
        "Appointment Updated",
        "Your appointment with {provider} has been updated: {date} at {time}",
        "Your appointment with {requester} has been updated: {date} at {time}",
    ),
    LifecycleEvent.COMPLETED: Template(
        "Appointment Completed",
        "Your appointment with {provider} on {date} has been marked as completed.",
        "Your appointment with {requester} on {date} has been marked as completed.",
    ),
    LifecycleEvent.CANCELLED: Template(
        "Appointment Cancelled",
        "Your appointment with {provider} on {date} has been cancelled.",
        "Your appointment with {requester} on {date} has been cancelled.",
    ),
    LifecycleEvent.NO_SHOW: Template(
        "Appointment No Show",
        "You missed your appointment with {provider} on {date}.",
        "{requester} missed their appointment scheduled for {date}.",
    ),
    LifecycleEvent.REMINDER: Template(
        "Appointment Reminder",
        "Reminder: You have an appointment with {provider} on {date} at {time}",
        "Reminder: You have an appointment with {requester} on {date} at {time}",
    ),
}


def template_kind(event: LifecycleEvent) -> str:
    return f"appointment_{LifecycleEvent(event).value}"


def build_intents(
    event: LifecycleEvent,
    appointment: Appointment,
    requester: Party | None,
    provider: Party | None,
) -> list[NotificationIntent]:
    """Build one intent per resolvable party.

    Args:
        event: Lifecycle event being announced
        appointment: Appointment after the change
        requester: Resolved requester, or None if it could not be resolved
        provider: Resolved provider, or None if it could not be resolved

    Returns:
        Up to two intents, requester first. An unresolved party is
        omitted rather than failing the whole fan-out.
    """
    event = LifecycleEvent(event)
    template = TEMPLATES[event]

    names = {
        "requester": requester.name if requester else appointment.requester_id,
        "provider": provider.name if provider else appointment.provider_id,
        "date": appointment.start_time.strftime("%Y-%m-%d"),
        "time": appointment.start_time.strftime("%H:%M"),
    }

    audiences = [
        (requester, PartyRole.REQUESTER, template.requester_message, appointment.provider_id),
        (provider, PartyRole.PROVIDER, template.provider_message, appointment.requester_id),
    ]

    intents = []
    for party, role, message, counterpart_id in audiences:
        if party is None:
            continue
        intents.append(
            NotificationIntent(
                target_party_id=party.id,
                template_kind=template_kind(event),
                event=event,
                context={
                    "appointment_id": appointment.id,
                    "title": template.title,
                    "message": message.format(**names),
                    "role": role.value,
                    "counterpart_id": counterpart_id,
                    "status": appointment.status.value,
                    "start_time": appointment.start_time.isoformat(),
                    "end_time": appointment.end_time.isoformat(),
                    "linked_resource_id": appointment.linked_resource_id,
                },
            )
        )
    return intents
