"""Centralized configuration for the slotwise package.

Provides paths, scheduling defaults, and environment configuration
used across all modules.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Package root (slotwise/ directory)
PACKAGE_ROOT = Path(__file__).parent

# Working directory (where the user runs the CLI or server from)
WORKING_DIR = Path.cwd()

# Load environment variables from current working directory
load_dotenv(WORKING_DIR / ".env")

# Persistence
DATABASE_PATH = os.getenv("SLOTWISE_DB_PATH", str(WORKING_DIR / "slotwise.db"))

# Working hours defaults (overridable per call)
DEFAULT_START_HOUR = int(os.getenv("SLOTWISE_START_HOUR", "9"))
DEFAULT_END_HOUR = int(os.getenv("SLOTWISE_END_HOUR", "17"))
DEFAULT_SLOT_DURATION_MINUTES = int(os.getenv("SLOTWISE_SLOT_MINUTES", "30"))

# All scheduling arithmetic happens in this single zone
REFERENCE_TIMEZONE = os.getenv("SLOTWISE_TIMEZONE", "UTC")

# Listing
DEFAULT_PAGE_SIZE = int(os.getenv("SLOTWISE_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("SLOTWISE_MAX_PAGE_SIZE", "100"))

# Reminders are sent for appointments starting within this window
REMINDER_LEAD_HOURS = float(os.getenv("SLOTWISE_REMINDER_LEAD_HOURS", "24"))

# Notification dispatch thread pool size
DISPATCH_WORKERS = int(os.getenv("SLOTWISE_DISPATCH_WORKERS", "4"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
