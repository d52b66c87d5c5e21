"""HTTP API for the scheduling engine."""

from slotwise.api.app import ERROR_STATUS_CODES, create_app

__all__ = ["ERROR_STATUS_CODES", "create_app"]
