"""Store factory for YAML/dict-configured persistence.

Creates AppointmentDB instances from configuration with support for:
- File-backed and in-memory SQLite
- Environment variable expansion for paths
"""

import os
import re
from typing import Any

from slotwise.config import DATABASE_PATH
from slotwise.storage.database import AppointmentDB


def expand_env_vars(value: Any) -> Any:
    """Expand ${VAR} patterns in string.

    Args:
        value: Value to expand. Non-strings pass through unchanged.

    Returns:
        String with ${VAR} patterns replaced by environment values.
        Missing vars keep original ${VAR} pattern.
    """
    if not isinstance(value, str):
        return value

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return re.sub(r"\$\{([^}]+)\}", replacer, value)


def get_store(config: dict | None = None, *, init_schema: bool = True) -> AppointmentDB:
    """Create an appointment store from config.

    Args:
        config: Store configuration dict with keys:
            - type: "sqlite" | "memory" (default: "sqlite")
            - path: SQLite file path (sqlite type, default: DATABASE_PATH)
            - timeout: Lock wait in seconds (default: 5.0)
        init_schema: Create tables if missing

    Returns:
        Configured AppointmentDB

    Raises:
        ValueError: If unknown store type
    """
    config = config or {}
    store_type = config.get("type", "sqlite")
    timeout = float(config.get("timeout", 5.0))

    if store_type == "sqlite":
        path = expand_env_vars(config.get("path", DATABASE_PATH))
        store = AppointmentDB(path, timeout=timeout)
    elif store_type == "memory":
        store = AppointmentDB(":memory:", timeout=timeout)
    else:
        raise ValueError(f"Unknown store type: {store_type}")

    if init_schema:
        store.init_schema()
    return store
