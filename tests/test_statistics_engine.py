"""Tests for StatisticsEngine - pure logic, no HA fixtures needed.

Calendar reference: 2024-01-01 is a Monday.
"""

from __future__ import annotations

import pytest

from custom_components.habit_tracker import const
from custom_components.habit_tracker.engines.statistics_engine import (
    StatisticsEngine,
)

from .conftest import create_mock_habit_data

DAILY = create_mock_habit_data()
WEEKLY = create_mock_habit_data(frequency=const.FREQUENCY_WEEKLY)
MON_WED_FRI = create_mock_habit_data(
    frequency=const.FREQUENCY_CUSTOM, frequency_days=[1, 3, 5]
)

# =============================================================================
# TEST: STREAKS
# =============================================================================


class TestDailyStreaks:
    """Streaks counted in applicable days."""

    def test_consecutive_days(self) -> None:
        """Three consecutive completions ending today."""
        result = StatisticsEngine.calculate_streaks(
            DAILY, ["2024-01-01", "2024-01-02", "2024-01-03"], "2024-01-03"
        )
        assert result == {"current_streak": 3, "best_streak": 3}

    def test_gap_breaks_streak(self) -> None:
        """A missed day resets the current streak but not the best."""
        result = StatisticsEngine.calculate_streaks(
            DAILY, ["2024-01-01", "2024-01-02", "2024-01-04"], "2024-01-04"
        )
        assert result == {"current_streak": 1, "best_streak": 2}

    def test_today_not_done_yet_keeps_streak(self) -> None:
        """An uncompleted reference day is a grace period."""
        result = StatisticsEngine.calculate_streaks(
            DAILY, ["2024-01-01", "2024-01-02", "2024-01-03"], "2024-01-04"
        )
        assert result == {"current_streak": 3, "best_streak": 3}

    def test_yesterday_missed_breaks_streak(self) -> None:
        """Grace only covers the reference day itself."""
        result = StatisticsEngine.calculate_streaks(
            DAILY, ["2024-01-01", "2024-01-02"], "2024-01-04"
        )
        assert result == {"current_streak": 0, "best_streak": 2}

    def test_unordered_input(self) -> None:
        """Completion order does not matter."""
        result = StatisticsEngine.calculate_streaks(
            DAILY, ["2024-01-03", "2024-01-01", "2024-01-02"], "2024-01-03"
        )
        assert result["current_streak"] == 3

    def test_no_completions(self) -> None:
        """No history means no streak."""
        assert StatisticsEngine.calculate_streaks(DAILY, [], "2024-01-10") == {
            "current_streak": 0,
            "best_streak": 0,
        }

    def test_custom_skips_unscheduled_days(self) -> None:
        """Mon/Wed/Fri completions form an unbroken streak across off days."""
        result = StatisticsEngine.calculate_streaks(
            MON_WED_FRI,
            ["2024-01-01", "2024-01-03", "2024-01-05", "2024-01-08"],
            "2024-01-09",
        )
        assert result == {"current_streak": 4, "best_streak": 4}

    def test_custom_without_days_has_no_streak(self) -> None:
        """A custom habit with no weekdays is never due, so never streaks."""
        habit = create_mock_habit_data(
            frequency=const.FREQUENCY_CUSTOM, frequency_days=[]
        )
        result = StatisticsEngine.calculate_streaks(
            habit, ["2024-01-01", "2024-01-02"], "2024-01-02"
        )
        assert result == {"current_streak": 0, "best_streak": 0}

    def test_malformed_date_raises(self) -> None:
        """Malformed completion dates fail fast."""
        with pytest.raises(ValueError):
            StatisticsEngine.calculate_streaks(DAILY, ["2024/01/01"], "2024-01-02")


class TestWeeklyStreaks:
    """Streaks counted in Monday-start weeks."""

    def test_current_and_best(self) -> None:
        """Weeks 1, 2 and 4 completed; reference in week 4."""
        result = StatisticsEngine.calculate_streaks(
            WEEKLY, ["2024-01-02", "2024-01-10", "2024-01-24"], "2024-01-25"
        )
        assert result == {"current_streak": 1, "best_streak": 2}

    def test_current_week_not_done_yet(self) -> None:
        """An uncompleted reference week does not break the streak."""
        result = StatisticsEngine.calculate_streaks(
            WEEKLY, ["2024-01-02", "2024-01-10"], "2024-01-17"
        )
        assert result["current_streak"] == 2

    def test_multiple_completions_in_one_week(self) -> None:
        """Extra completions in a week still count as one week."""
        result = StatisticsEngine.calculate_streaks(
            WEEKLY, ["2024-01-01", "2024-01-03", "2024-01-07"], "2024-01-07"
        )
        assert result == {"current_streak": 1, "best_streak": 1}

    def test_sunday_belongs_to_previous_monday(self) -> None:
        """Sunday 01-07 and Monday 01-08 are consecutive weeks."""
        result = StatisticsEngine.calculate_streaks(
            WEEKLY, ["2024-01-07", "2024-01-08"], "2024-01-08"
        )
        assert result["current_streak"] == 2


# =============================================================================
# TEST: COMPLETION RATE
# =============================================================================


class TestCompletionRate:
    """Windowed completion rates."""

    def test_custom_week_fully_completed(self) -> None:
        """Mon/Wed/Fri all done within a 7-day window."""
        result = StatisticsEngine.calculate_completion_rate(
            MON_WED_FRI, ["2024-01-01", "2024-01-03", "2024-01-05"], 7, "2024-01-07"
        )
        assert result["completed"] == 3
        assert result["expected"] == 3
        assert result["percentage"] == 100

    def test_daily_partial_week(self) -> None:
        """Four of seven days."""
        result = StatisticsEngine.calculate_completion_rate(
            DAILY,
            ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"],
            7,
            "2024-01-07",
        )
        assert result["completed"] == 4
        assert result["expected"] == 7
        assert result["percentage"] == 57

    def test_window_clipped_to_creation(self) -> None:
        """Days before creation are not expected."""
        habit = create_mock_habit_data(created_at="2024-01-05")
        result = StatisticsEngine.calculate_completion_rate(
            habit, ["2024-01-05"], 7, "2024-01-07"
        )
        assert result["expected"] == 3
        assert result["completed"] == 1

    def test_completions_outside_window_ignored(self) -> None:
        """Completions before the window never push the rate over 100%."""
        result = StatisticsEngine.calculate_completion_rate(
            DAILY,
            ["2023-12-30", "2023-12-31", "2024-01-01", "2024-01-02"],
            2,
            "2024-01-02",
        )
        assert result["completed"] == 2
        assert result["expected"] == 2
        assert result["rate"] == 1.0

    def test_all_time_starts_at_first_completion_without_creation(self) -> None:
        """Without a creation date, history starts at the first completion."""
        habit = create_mock_habit_data(created_at="")
        result = StatisticsEngine.calculate_completion_rate(
            habit, ["2024-01-03", "2024-01-04"], const.WINDOW_ALL, "2024-01-06"
        )
        assert result["expected"] == 4
        assert result["percentage"] == 50

    def test_all_time_with_no_history(self) -> None:
        """No creation date and no completions covers only the reference day."""
        habit = create_mock_habit_data(created_at="")
        result = StatisticsEngine.calculate_completion_rate(
            habit, [], const.WINDOW_ALL, "2024-01-06"
        )
        assert result == {"completed": 0, "expected": 1, "rate": 0.0, "percentage": 0}

    def test_weekly_rate_counts_weeks(self) -> None:
        """Two of three weeks completed."""
        result = StatisticsEngine.calculate_completion_rate(
            WEEKLY,
            ["2024-01-02", "2024-01-03", "2024-01-10"],
            const.WINDOW_ALL,
            "2024-01-17",
        )
        assert result["completed"] == 2
        assert result["expected"] == 3
        assert result["percentage"] == 67

    def test_reference_before_creation(self) -> None:
        """A window entirely before creation expects nothing."""
        habit = create_mock_habit_data(created_at="2024-02-01")
        result = StatisticsEngine.calculate_completion_rate(
            habit, [], 7, "2024-01-10"
        )
        assert result == {"completed": 0, "expected": 0, "rate": 0.0, "percentage": 0}

    def test_zero_window(self) -> None:
        """A zero-day window is empty."""
        result = StatisticsEngine.calculate_completion_rate(
            DAILY, ["2024-01-10"], 0, "2024-01-10"
        )
        assert result["expected"] == 0
        assert result["percentage"] == 0

    @pytest.mark.parametrize("window", [-1, "week", True, 7.5])
    def test_invalid_window_raises(self, window) -> None:
        """Negative or non-integer windows are rejected."""
        with pytest.raises(ValueError):
            StatisticsEngine.calculate_completion_rate(DAILY, [], window, "2024-01-10")
