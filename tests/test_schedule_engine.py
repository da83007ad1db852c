"""Tests for ApplicabilityResolver - pure logic, no HA fixtures needed."""

from datetime import date

import pytest

from custom_components.habit_tracker import const
from custom_components.habit_tracker.engines.schedule_engine import (
    ApplicabilityResolver,
)

from .conftest import create_mock_habit_data


class TestApplicableDates:
    """Date enumeration per frequency."""

    def test_daily_every_day(self) -> None:
        """A daily habit is due every day in range."""
        resolver = ApplicabilityResolver(create_mock_habit_data())
        days = resolver.applicable_dates(date(2024, 1, 1), date(2024, 1, 7))
        assert len(days) == 7
        assert days[0] == date(2024, 1, 1)
        assert days[-1] == date(2024, 1, 7)

    def test_custom_weekdays(self) -> None:
        """Mon/Wed/Fri habits are due on those weekdays only, in order."""
        resolver = ApplicabilityResolver(
            create_mock_habit_data(
                frequency=const.FREQUENCY_CUSTOM, frequency_days=[5, 1, 3]
            )
        )
        assert resolver.applicable_dates(date(2024, 1, 1), date(2024, 1, 14)) == [
            date(2024, 1, 1),
            date(2024, 1, 3),
            date(2024, 1, 5),
            date(2024, 1, 8),
            date(2024, 1, 10),
            date(2024, 1, 12),
        ]

    def test_custom_without_days_is_never_due(self) -> None:
        """A custom habit with no weekdays selected has no applicable dates."""
        for days in (None, []):
            resolver = ApplicabilityResolver(
                create_mock_habit_data(
                    frequency=const.FREQUENCY_CUSTOM, frequency_days=days
                )
            )
            assert resolver.applicable_dates(date(2024, 1, 1), date(2024, 1, 31)) == []
            assert not resolver.is_applicable(date(2024, 1, 10))

    def test_range_clipped_to_creation(self) -> None:
        """Nothing before the creation date is applicable."""
        resolver = ApplicabilityResolver(
            create_mock_habit_data(created_at="2024-01-05")
        )
        days = resolver.applicable_dates(date(2024, 1, 1), date(2024, 1, 7))
        assert days == [date(2024, 1, 5), date(2024, 1, 6), date(2024, 1, 7)]
        assert not resolver.is_applicable(date(2024, 1, 4))

    def test_range_before_creation_is_empty(self) -> None:
        """A window ending before creation has no applicable dates."""
        resolver = ApplicabilityResolver(
            create_mock_habit_data(created_at="2024-02-01")
        )
        assert resolver.applicable_dates(date(2024, 1, 1), date(2024, 1, 31)) == []

    def test_weekly_treated_as_every_day(self) -> None:
        """Weekly habits are scheduled every day; the week is the counting unit."""
        resolver = ApplicabilityResolver(
            create_mock_habit_data(frequency=const.FREQUENCY_WEEKLY)
        )
        assert resolver.is_weekly
        assert len(resolver.applicable_dates(date(2024, 1, 1), date(2024, 1, 7))) == 7


class TestScheduling:
    """Recurrence checks that ignore creation date."""

    def test_is_scheduled_ignores_creation(self) -> None:
        """Past days can be listed for back-filling."""
        resolver = ApplicabilityResolver(
            create_mock_habit_data(created_at="2024-02-01")
        )
        assert resolver.is_scheduled(date(2024, 1, 10))
        assert not resolver.is_applicable(date(2024, 1, 10))

    def test_custom_is_scheduled_by_weekday(self) -> None:
        """Sunday is index 0."""
        resolver = ApplicabilityResolver(
            create_mock_habit_data(frequency=const.FREQUENCY_CUSTOM, frequency_days=[0])
        )
        assert resolver.is_scheduled(date(2024, 1, 7))
        assert not resolver.is_scheduled(date(2024, 1, 8))

    def test_unknown_frequency_raises(self) -> None:
        """An unrecognized frequency tag is rejected."""
        with pytest.raises(ValueError):
            ApplicabilityResolver(create_mock_habit_data(frequency="monthly"))
