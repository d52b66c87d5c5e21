"""Notification intents and dispatch boundary."""

from slotwise.notifications.dispatch import (
    BackgroundDispatcher,
    LoggingDispatcher,
    NotificationDispatcher,
    dispatch_intents,
)
from slotwise.notifications.fanout import TEMPLATES, build_intents, template_kind

__all__ = [
    "BackgroundDispatcher",
    "LoggingDispatcher",
    "NotificationDispatcher",
    "TEMPLATES",
    "build_intents",
    "dispatch_intents",
    "template_kind",
]
