"""Tests for the appointment status state machine."""

import pytest

from slotwise.constants import AppointmentStatus, LifecycleEvent
from slotwise.errors import InvalidTransitionError
from slotwise.scheduling import ALLOWED_TRANSITIONS, can_transition, ensure_transition

S = AppointmentStatus


class TestTransitions:
    """Tests for can_transition/ensure_transition."""

    @pytest.mark.parametrize("target", list(S))
    def test_scheduled_can_go_anywhere(self, target):
        assert can_transition(S.SCHEDULED, target)

    @pytest.mark.parametrize("terminal", sorted(S.terminal(), key=lambda s: s.value))
    @pytest.mark.parametrize("target", list(S))
    def test_terminal_statuses_are_closed(self, terminal, target):
        """Nothing leaves a terminal status, not even to itself."""
        assert not can_transition(terminal, target)
        with pytest.raises(InvalidTransitionError) as exc_info:
            ensure_transition(terminal, target)
        assert exc_info.value.current == terminal.value
        assert exc_info.value.requested == target.value

    def test_accepts_plain_strings(self):
        assert can_transition("scheduled", "completed")
        assert not can_transition("cancelled", "scheduled")

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(S)


class TestStatusHelpers:
    """Tests for status and event helpers."""

    def test_only_scheduled_blocks(self):
        assert S.blocking() == (S.SCHEDULED,)

    def test_is_terminal(self):
        assert not S.SCHEDULED.is_terminal
        assert S.NO_SHOW.is_terminal

    def test_event_for_terminal_status(self):
        assert LifecycleEvent.for_status(S.CANCELLED) is LifecycleEvent.CANCELLED
        assert LifecycleEvent.for_status(S.NO_SHOW) is LifecycleEvent.NO_SHOW

    def test_no_event_for_scheduled(self):
        with pytest.raises(ValueError):
            LifecycleEvent.for_status(S.SCHEDULED)
