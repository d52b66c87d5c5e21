"""Shared test fixtures for slotwise tests."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from slotwise.models import WorkingHours
from slotwise.scheduling import AppointmentManager
from slotwise.storage import AppointmentDB

# A Monday, so the whole Mon-Fri week follows
MONDAY = date(2026, 1, 5)


def at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    """Datetime on the test Monday (or another day)."""
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = AppointmentDB(":memory:")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def provider(db):
    """A provider registered in the database."""
    return db.create_party(name="Dr. Smith", role="provider", party_id="prov_1")


@pytest.fixture
def other_provider(db):
    """A second provider with an independent calendar."""
    return db.create_party(name="Dr. Jones", role="provider", party_id="prov_2")


@pytest.fixture
def requester(db):
    """A requester registered in the database."""
    return db.create_party(name="Alice", role="requester", party_id="req_1")


@pytest.fixture
def other_requester(db):
    """A requester who is not party to the fixture appointments."""
    return db.create_party(name="Bob", role="requester", party_id="req_2")


@pytest.fixture
def dispatcher() -> MagicMock:
    """Mock notification dispatcher."""
    return MagicMock()


@pytest.fixture
def manager(db, provider, requester, dispatcher) -> AppointmentManager:
    """Manager over the in-memory database with a mock dispatcher."""
    return AppointmentManager(db, dispatcher=dispatcher)


@pytest.fixture
def short_day() -> WorkingHours:
    """09:00-10:00 with 15-minute slots."""
    return WorkingHours(start_hour=9, end_hour=10, slot_duration_minutes=15)
