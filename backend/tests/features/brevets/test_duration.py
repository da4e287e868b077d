"""
Tests for event duration and start/end helpers.
"""

from datetime import date, datetime, time

import pytest

from randonneurs.features.brevets import (
    estimate_event_duration,
    event_end,
    event_start,
    parse_start_time,
)


class TestEstimateEventDuration:
    def test_brevet_uses_time_limit(self):
        duration = estimate_event_duration(200, "brevet")
        assert (duration.hours, duration.minutes) == (13, 30)

    def test_populaire(self):
        duration = estimate_event_duration(100, "populaire")
        assert (duration.hours, duration.minutes) == (7, 0)

    def test_fleche(self):
        duration = estimate_event_duration(360, "fleche")
        assert (duration.hours, duration.minutes) == (24, 0)

    def test_over_1200km(self):
        duration = estimate_event_duration(1300, "brevet")
        assert (duration.hours, duration.minutes) == (87, 0)


class TestStartTime:
    def test_default_when_missing(self):
        assert parse_start_time(None) == time(8, 0)
        assert parse_start_time("") == time(8, 0)

    def test_explicit_default(self):
        assert parse_start_time(None, "06:00") == time(6, 0)

    def test_hh_mm(self):
        assert parse_start_time("06:30") == time(6, 30)

    def test_with_seconds(self):
        assert parse_start_time("07:15:00") == time(7, 15)

    @pytest.mark.parametrize("bad", ["noon", "7", "25:00", "07:75"])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            parse_start_time(bad)


class TestEventStartEnd:
    def test_start(self):
        assert event_start(date(2026, 5, 1), "08:00") == datetime(2026, 5, 1, 8, 0)

    def test_end_200km(self):
        assert event_end(date(2026, 5, 1), "08:00", 200) == datetime(2026, 5, 1, 21, 30)

    def test_end_crosses_midnight(self):
        assert event_end(date(2026, 6, 6), "20:00", 400) == datetime(2026, 6, 7, 23, 0)
