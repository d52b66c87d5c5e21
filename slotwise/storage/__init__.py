"""Storage utilities for appointment persistence."""

from slotwise.storage.database import AppointmentDB, generate_id
from slotwise.storage.factory import expand_env_vars, get_store

__all__ = [
    "AppointmentDB",
    "expand_env_vars",
    "generate_id",
    "get_store",
]
