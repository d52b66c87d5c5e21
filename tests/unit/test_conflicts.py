"""Tests for overlap detection against a provider's calendar."""

from datetime import datetime

import pytest

from slotwise.constants import AppointmentStatus
from slotwise.models import Appointment, Interval
from slotwise.scheduling import find_conflicts, has_conflict, is_conflicting
from tests.conftest import at


def make_appointment(appt_id, start, end, status=AppointmentStatus.SCHEDULED, provider_id="prov_1"):
    return Appointment(
        id=appt_id,
        requester_id="req_1",
        provider_id=provider_id,
        start_time=start,
        end_time=end,
        status=status,
    )


@pytest.fixture
def booked(db, provider, other_provider):
    """Provider booked 10:00-11:00; other provider booked 9:00-9:30."""
    db.insert_appointment(make_appointment("appt_a", at(10), at(11)))
    db.insert_appointment(make_appointment("appt_b", at(9), at(9, 30), provider_id="prov_2"))
    return db


class TestIsConflicting:
    """Tests for the shared overlap predicate."""

    def test_no_appointments(self):
        assert is_conflicting(Interval(start=at(9), end=at(10)), []) is False

    def test_overlap_with_scheduled(self):
        appts = [make_appointment("a", at(9, 30), at(10))]
        assert is_conflicting(Interval(start=at(9), end=at(9, 45)), appts) is True

    @pytest.mark.parametrize(
        "status",
        [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW],
    )
    def test_non_blocking_statuses_ignored(self, status):
        """Only scheduled appointments occupy the calendar."""
        appts = [make_appointment("a", at(9), at(10), status=status)]
        assert is_conflicting(Interval(start=at(9), end=at(10)), appts) is False


class TestFindConflicts:
    """Tests for find_conflicts/has_conflict against the store."""

    def test_overlap_found(self, booked):
        conflicts = find_conflicts(booked, "prov_1", Interval(start=at(10, 30), end=at(11, 30)))
        assert [c.id for c in conflicts] == ["appt_a"]

    def test_touching_before_is_free(self, booked):
        assert not has_conflict(booked, "prov_1", Interval(start=at(9), end=at(10)))

    def test_touching_after_is_free(self, booked):
        assert not has_conflict(booked, "prov_1", Interval(start=at(11), end=at(12)))

    def test_other_provider_calendar_is_independent(self, booked):
        """prov_2's 9:00 booking does not block prov_1."""
        assert not has_conflict(booked, "prov_1", Interval(start=at(9), end=at(9, 30)))
        assert has_conflict(booked, "prov_2", Interval(start=at(9), end=at(9, 30)))

    def test_exclude_self(self, booked):
        """A rescheduled appointment never conflicts with itself."""
        candidate = Interval(start=at(10, 15), end=at(11, 15))
        assert has_conflict(booked, "prov_1", candidate)
        assert not has_conflict(booked, "prov_1", candidate, exclude_appointment_id="appt_a")

    def test_cancelled_frees_time(self, booked):
        appt = booked.get_appointment("appt_a")
        booked.update_appointment(appt.model_copy(update={"status": AppointmentStatus.CANCELLED}))
        assert not has_conflict(booked, "prov_1", Interval(start=at(10), end=at(11)))

    def test_long_appointment_spanning_midnight(self, db, provider):
        db.insert_appointment(
            make_appointment("night", datetime(2026, 1, 5, 22), datetime(2026, 1, 6, 2))
        )
        candidate = Interval(start=datetime(2026, 1, 6, 1), end=datetime(2026, 1, 6, 3))
        assert has_conflict(db, "prov_1", candidate)

    def test_unknown_provider_has_no_conflicts(self, booked):
        assert find_conflicts(booked, "nobody", Interval(start=at(10), end=at(11))) == []
