"""Tests for dt_utils - pure date helpers, no HA fixtures needed."""

# pylint: disable=redefined-outer-name

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from custom_components.habit_tracker.utils import dt_utils


@pytest.fixture
def tokyo_timezone():
    """Use a timezone ahead of UTC for the duration of a test."""
    dt_utils.set_default_timezone(ZoneInfo("Asia/Tokyo"))
    yield
    dt_utils.set_default_timezone(None)


class TestParsing:
    """Strict calendar date parsing."""

    def test_parse_valid_date(self) -> None:
        """A YYYY-MM-DD string parses to a date."""
        assert dt_utils.dt_parse_iso_date("2024-02-29") == date(2024, 2, 29)

    def test_parse_passes_dates_through(self) -> None:
        """Dates are returned unchanged and datetimes reduced to their date."""
        assert dt_utils.dt_parse_iso_date(date(2024, 1, 5)) == date(2024, 1, 5)
        assert dt_utils.dt_parse_iso_date(datetime(2024, 1, 5, 22, 0)) == date(
            2024, 1, 5
        )

    @pytest.mark.parametrize(
        "value", ["2024-1-5", "2024-02-30", "20240105", "2024-01-05T10:00:00", ""]
    )
    def test_parse_rejects_malformed_dates(self, value: str) -> None:
        """Anything other than a real YYYY-MM-DD date fails fast."""
        with pytest.raises(ValueError):
            dt_utils.dt_parse_iso_date(value)

    def test_created_date_from_date_only_string(self) -> None:
        """A bare date string is taken as is."""
        assert dt_utils.dt_created_date("2024-01-15") == date(2024, 1, 15)

    def test_created_date_missing(self) -> None:
        """No creation timestamp means no clipping date."""
        assert dt_utils.dt_created_date(None) is None
        assert dt_utils.dt_created_date("") is None

    def test_created_date_converts_to_local_day(self, tokyo_timezone) -> None:
        """An aware UTC timestamp late in the day is the next local day in Tokyo."""
        assert dt_utils.dt_created_date("2024-01-15T23:30:00+00:00") == date(
            2024, 1, 16
        )

    def test_created_date_naive_timestamp_is_local(self, tokyo_timezone) -> None:
        """A naive timestamp keeps its calendar day."""
        assert dt_utils.dt_created_date("2024-01-15T23:30:00") == date(2024, 1, 15)


class TestWeeks:
    """Monday-start weeks and Sunday-based weekday indices."""

    def test_weekday_index_sunday_is_zero(self) -> None:
        """2024-01-07 is a Sunday, 2024-01-06 a Saturday."""
        assert dt_utils.dt_weekday_index(date(2024, 1, 7)) == 0
        assert dt_utils.dt_weekday_index(date(2024, 1, 1)) == 1
        assert dt_utils.dt_weekday_index(date(2024, 1, 6)) == 6

    def test_week_bounds(self) -> None:
        """A Sunday belongs to the week that started the previous Monday."""
        assert dt_utils.dt_start_of_week(date(2024, 1, 7)) == date(2024, 1, 1)
        assert dt_utils.dt_end_of_week(date(2024, 1, 3)) == date(2024, 1, 7)

    def test_week_key_uses_iso_year(self) -> None:
        """Sunday 2023-01-01 belongs to the last ISO week of 2022."""
        assert dt_utils.dt_week_key(date(2023, 1, 1)) == "2022-W52"
        assert dt_utils.dt_week_key(date(2024, 1, 1)) == "2024-W01"
        assert dt_utils.dt_week_key(date(2024, 1, 7)) == dt_utils.dt_week_key(
            date(2024, 1, 1)
        )

    def test_each_week_start_covers_partial_weeks(self) -> None:
        """Weeks overlapping both ends of the range are included."""
        assert dt_utils.dt_each_week_start(date(2024, 1, 3), date(2024, 1, 15)) == [
            date(2024, 1, 1),
            date(2024, 1, 8),
            date(2024, 1, 15),
        ]

    def test_each_day_empty_when_reversed(self) -> None:
        """An inverted range yields nothing."""
        assert dt_utils.dt_each_day(date(2024, 1, 2), date(2024, 1, 1)) == []
        assert len(dt_utils.dt_each_day(date(2024, 1, 1), date(2024, 1, 7))) == 7


class TestMonthsAndLabels:
    """Month math and report labels."""

    def test_end_of_month_leap_year(self) -> None:
        """February 2024 has 29 days."""
        assert dt_utils.dt_end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)

    def test_subtract_months_clamps_day(self) -> None:
        """March 31 minus one month is the last day of February."""
        assert dt_utils.dt_subtract_months(date(2024, 3, 31), 1) == date(2024, 2, 29)

    def test_labels(self) -> None:
        """Short, week range and month labels."""
        assert dt_utils.dt_short_label(date(2024, 1, 20)) == "Jan 20"
        assert (
            dt_utils.dt_week_range_label(date(2024, 1, 15), date(2024, 1, 21))
            == "Jan 15 - Jan 21"
        )
        assert dt_utils.dt_month_label(date(2024, 1, 20)) == "January 2024"
        assert dt_utils.dt_weekday_short_label(0) == "Sun"
