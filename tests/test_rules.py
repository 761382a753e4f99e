"""Unit tests for the pure validation / calendar / scoring rules."""

from datetime import datetime, timedelta, timezone

import pytest

from carpool.domain.enums import TripStatus
from carpool.domain.errors import ValidationError
from carpool.domain.rules import (
    average_score,
    ensure_utc,
    is_positive_int,
    is_valid_place,
    is_valid_score,
    parse_trip_status,
    utc_day_bounds,
)


class TestPlaces:
    @pytest.mark.parametrize("value", ["Bogotá", "Medellín Terminal", "  Tunja Plaza "])
    def test_valid(self, value):
        assert is_valid_place(value)

    @pytest.mark.parametrize("value", ["Lima", "    ab   ", "", "123 Calle Falsa", "9Norte"])
    def test_invalid(self, value):
        assert not is_valid_place(value)

    def test_non_string(self):
        assert not is_valid_place(12345)


class TestNumbers:
    @pytest.mark.parametrize("value", [1, 4, 60000])
    def test_positive_ints(self, value):
        assert is_positive_int(value)

    @pytest.mark.parametrize("value", [0, -3, 1.5, True, "5", None])
    def test_not_positive_ints(self, value):
        assert not is_positive_int(value)

    @pytest.mark.parametrize("value", [1, 3, 5])
    def test_valid_scores(self, value):
        assert is_valid_score(value)

    @pytest.mark.parametrize("value", [0, 6, 4.5, True, None])
    def test_invalid_scores(self, value):
        assert not is_valid_score(value)


class TestDayBounds:
    def test_bounds_cover_the_whole_utc_day(self):
        start, end = utc_day_bounds("2025-06-01")
        assert start == datetime(2025, 6, 1, 0, 0, 0, tzinfo=timezone.utc)
        assert end == datetime(2025, 6, 1, 23, 59, 59, 999000, tzinfo=timezone.utc)

    def test_bounds_are_not_shifted_by_local_time(self):
        start, end = utc_day_bounds("2025-12-31")
        assert start.date() == end.date() == datetime(2025, 12, 31).date()

    @pytest.mark.parametrize(
        "value", ["", "2025-6-1", "01/06/2025", "2025-02-30", "tomorrow", "2025-06-01T10:00"]
    )
    def test_malformed(self, value):
        with pytest.raises(ValidationError):
            utc_day_bounds(value)


class TestMisc:
    def test_ensure_utc_attaches_utc_to_naive(self):
        naive = datetime(2025, 6, 1, 10, 0)
        assert ensure_utc(naive).tzinfo == timezone.utc
        assert ensure_utc(naive).hour == 10

    def test_ensure_utc_converts_offsets(self):
        bogota = timezone(timedelta(hours=-5))
        value = datetime(2025, 6, 1, 22, 0, tzinfo=bogota)
        assert ensure_utc(value) == datetime(2025, 6, 2, 3, 0, tzinfo=timezone.utc)

    def test_average_of_nothing_is_zero(self):
        assert average_score([]) == 0

    def test_average(self):
        assert average_score([5, 4, 3]) == 4

    def test_parse_status(self):
        assert parse_trip_status("full") == TripStatus.FULL
        assert parse_trip_status(None) is None
        with pytest.raises(ValidationError):
            parse_trip_status("archived")
