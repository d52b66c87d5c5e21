"""
Scheduling Services Module

Core business logic for appointment scheduling:
- Overlap detection (conflicts.py)
- Slot generation (slots.py)
- Status state machine (transitions.py)
- Appointment lifecycle (lifecycle.py)
"""

from slotwise.scheduling.conflicts import find_conflicts, has_conflict, is_conflicting
from slotwise.scheduling.lifecycle import AppointmentManager
from slotwise.scheduling.slots import SlotSequence, generate_slots
from slotwise.scheduling.transitions import (
    ALLOWED_TRANSITIONS,
    can_transition,
    ensure_transition,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AppointmentManager",
    "SlotSequence",
    "can_transition",
    "ensure_transition",
    "find_conflicts",
    "generate_slots",
    "has_conflict",
    "is_conflicting",
]
