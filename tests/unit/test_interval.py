"""Tests for the half-open Interval type and interval resolution."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from slotwise.errors import InvalidIntervalError
from slotwise.models import Interval, normalize_datetime, resolve_interval
from tests.conftest import at


class TestInterval:
    """Tests for Interval construction and overlap."""

    def test_rejects_start_equal_to_end(self):
        """Empty ranges are not intervals."""
        with pytest.raises(ValidationError):
            Interval(start=at(9), end=at(9))

    def test_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            Interval(start=at(10), end=at(9))

    def test_duration(self):
        assert Interval(start=at(9), end=at(9, 45)).duration == timedelta(minutes=45)

    def test_from_duration(self):
        interval = Interval.from_duration(at(9), 30)
        assert interval.end == at(9, 30)

    def test_overlapping_ranges(self):
        a = Interval(start=at(9), end=at(10))
        b = Interval(start=at(9, 30), end=at(10, 30))
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_containment_overlaps(self):
        outer = Interval(start=at(9), end=at(12))
        inner = Interval(start=at(10), end=at(10, 15))
        assert outer.overlaps(inner)
        assert inner.overlaps(outer)

    def test_touching_ranges_do_not_overlap(self):
        """[9:00,9:30) and [9:30,10:00) share no instant."""
        a = Interval(start=at(9), end=at(9, 30))
        b = Interval(start=at(9, 30), end=at(10))
        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_intervals_are_hashable_and_comparable(self):
        assert Interval(start=at(9), end=at(10)) == Interval(start=at(9), end=at(10))
        assert len({Interval(start=at(9), end=at(10)), Interval(start=at(9), end=at(10))}) == 1


class TestResolveInterval:
    """Tests for resolve_interval's accepted end representations."""

    def test_explicit_end(self):
        assert resolve_interval(at(9), at(9, 45)).end == at(9, 45)

    def test_timedelta(self):
        assert resolve_interval(at(9), timedelta(minutes=20)).end == at(9, 20)

    def test_minutes(self):
        assert resolve_interval(at(9), 15).end == at(9, 15)

    def test_end_before_start_raises(self):
        with pytest.raises(InvalidIntervalError):
            resolve_interval(at(10), at(9))

    def test_zero_duration_raises(self):
        with pytest.raises(InvalidIntervalError):
            resolve_interval(at(9), 0)

    def test_negative_duration_raises(self):
        with pytest.raises(InvalidIntervalError):
            resolve_interval(at(9), timedelta(minutes=-5))

    def test_bool_is_not_minutes(self):
        with pytest.raises(InvalidIntervalError):
            resolve_interval(at(9), True)

    def test_non_datetime_start_raises(self):
        with pytest.raises(InvalidIntervalError):
            resolve_interval("2026-01-05T09:00", 30)

    def test_unsupported_end_type_raises(self):
        with pytest.raises(InvalidIntervalError):
            resolve_interval(at(9), "30")


class TestNormalizeDatetime:
    """Tests for reference-timezone normalization."""

    def test_naive_passes_through(self):
        assert normalize_datetime(at(9)) == at(9)

    def test_aware_is_converted_and_stripped(self):
        aware = datetime(2026, 1, 5, 11, 0, tzinfo=timezone(timedelta(hours=2)))
        result = normalize_datetime(aware)
        assert result.tzinfo is None
        assert result == at(9)
