"""Tests for the daily poll window."""

from datetime import date, datetime, time, timedelta

import pytest

from sec_watcher.errors import ConfigurationError
from sec_watcher.window import PollWindow, resolve_timezone


@pytest.fixture
def window(filing_day, eastern):
    """The default 06:00-22:00 Eastern window on the filing day."""
    return PollWindow.for_date(filing_day, time(6, 0), time(22, 0), eastern)


class TestPollWindow:
    """Test PollWindow bounds and is_open()."""

    def test_bounds_are_anchored_to_run_date(self, window, at):
        """Test that both bounds fall on the run date in Eastern time."""
        assert window.opens_at == at(6)
        assert window.closes_at == at(22)
        assert window.opens_at.utcoffset() == timedelta(hours=-4)  # EDT in May

    def test_open_inside_window(self, window, at):
        """Test that midday is inside the window."""
        assert window.is_open(at(12, 30))

    def test_bounds_are_inclusive(self, window, at):
        """Test that opening and closing instants both count as open."""
        assert window.is_open(at(6))
        assert window.is_open(at(22))

    def test_closed_before_and_after(self, window, at):
        """Test that a minute outside either bound is closed."""
        assert not window.is_open(at(5, 59))
        assert not window.is_open(at(22, 1))

    def test_does_not_reanchor_after_midnight(self, window, at, filing_day):
        """Test that the next day's morning stays outside this run's window."""
        assert not window.is_open(at(12, day=filing_day + timedelta(days=1)))

    def test_compares_across_timezones(self, window):
        """Test that a UTC instant is compared by absolute time."""
        noon_utc = datetime(2024, 5, 2, 16, 0, tzinfo=resolve_timezone("UTC"))
        assert window.is_open(noon_utc)  # 12:00 EDT

    def test_naive_time_uses_window_zone(self, window):
        """Test that naive datetimes are read as Eastern time."""
        assert window.is_open(datetime(2024, 5, 2, 7, 0))
        assert not window.is_open(datetime(2024, 5, 2, 23, 0))

    def test_winter_offset(self, eastern):
        """Test that a January window uses EST."""
        window = PollWindow.for_date(date(2024, 1, 15), time(6, 0), time(22, 0), eastern)
        assert window.opens_at.utcoffset() == timedelta(hours=-5)


class TestStartingAt:
    """Test PollWindow.starting_at()."""

    def test_uses_calendar_day_of_now(self, at, filing_day):
        """Test that a late start still anchors to that day and is closed."""
        window = PollWindow.starting_at(at(23, 30), time(6, 0), time(22, 0))
        assert window.opens_at.date() == filing_day
        assert not window.is_open(at(23, 30))

    def test_requires_aware_datetime(self):
        """Test that a naive start time is rejected."""
        with pytest.raises(ValueError, match="timezone-aware"):
            PollWindow.starting_at(datetime(2024, 5, 2, 9, 0), time(6, 0), time(22, 0))


class TestResolveTimezone:
    """Test resolve_timezone()."""

    def test_unknown_timezone_is_configuration_error(self):
        """Test that an unknown zone name is a configuration error."""
        with pytest.raises(ConfigurationError, match="Unknown timezone"):
            resolve_timezone("Mars/Olympus_Mons")
