"""Notification dispatch boundary.

Delivery is external. The engine hands intents to a dispatcher and never
lets a delivery failure reach the booking outcome: failures are logged
here and swallowed.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Protocol

from slotwise.config import DISPATCH_WORKERS
from slotwise.models import NotificationIntent

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Outbound delivery collaborator (push, email, in-app...)."""

    def dispatch(self, intent: NotificationIntent) -> None: ...


def dispatch_intents(
    dispatcher: NotificationDispatcher | None,
    intents: Iterable[NotificationIntent],
) -> int:
    """Hand each intent to the dispatcher, isolating failures.

    Returns:
        Number of intents accepted by the dispatcher
    """
    if dispatcher is None:
        return 0

    accepted = 0
    for intent in intents:
        try:
            dispatcher.dispatch(intent)
            accepted += 1
        except Exception:
            logger.exception(
                f"Notification dispatch failed: {intent.template_kind} -> {intent.target_party_id}"
            )
    return accepted


class LoggingDispatcher:
    """Dispatcher that only logs intents. Default when nothing is wired."""

    def dispatch(self, intent: NotificationIntent) -> None:
        logger.info(
            f"🔔 {intent.template_kind} -> {intent.target_party_id}: "
            f"{intent.context.get('message', '')}"
        )


class BackgroundDispatcher:
    """Runs another dispatcher on a thread pool.

    dispatch() returns immediately so delivery never holds a booking
    transaction open; delivery errors are logged from the worker.
    """

    def __init__(self, dispatcher: NotificationDispatcher, max_workers: int = DISPATCH_WORKERS):
        self._dispatcher = dispatcher
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="slotwise-dispatch"
        )

    def dispatch(self, intent: NotificationIntent) -> None:
        future = self._executor.submit(self._dispatcher.dispatch, intent)
        future.add_done_callback(partial(self._log_failure, intent))

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(intent: NotificationIntent, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error(
                f"Background dispatch failed: {intent.template_kind} -> "
                f"{intent.target_party_id}: {exc}"
            )
