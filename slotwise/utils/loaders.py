"""YAML configuration loaders.

Shared functions for reading working-hour profiles and engine settings
from YAML files.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from slotwise.errors import ConfigLoadError
from slotwise.models import WorkingHours


def load_yaml_config(path: str | Path) -> dict[str, Any] | None:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file (string or Path)

    Returns:
        Parsed YAML dict, or None if file is empty

    Raises:
        ConfigLoadError: If file not found or invalid YAML
    """
    path = Path(path)

    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e


def load_working_hours(path: str | Path) -> WorkingHours:
    """Load a working-hours profile.

    The file may hold the fields at top level or under a
    ``working_hours`` key; missing fields fall back to defaults.

    Example:
        working_hours:
          start_hour: 8
          end_hour: 12
          slot_duration_minutes: 20

    Raises:
        ConfigLoadError: If the file is missing, not YAML, or out of range
    """
    config = load_yaml_config(path) or {}
    if not isinstance(config, dict):
        raise ConfigLoadError(f"Expected a mapping in {path}")

    data = config.get("working_hours", config)
    try:
        return WorkingHours.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid working hours in {path}: {e}") from e


__all__ = ["load_yaml_config", "load_working_hours"]
