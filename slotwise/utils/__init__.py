"""Utility functions for configuration loading and logging."""

from slotwise.utils.loaders import load_working_hours, load_yaml_config
from slotwise.utils.logging import setup_logging

__all__ = [
    # Loaders
    "load_yaml_config",
    "load_working_hours",
    # Logging
    "setup_logging",
]
