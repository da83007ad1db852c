"""Statistics Engine - Frequency-aware streaks and completion rates.

This engine computes per-habit statistics from a habit record and its
completion dates:
- Current and best streaks (days for daily/custom, weeks for weekly)
- Completion rate over a trailing window or the habit's whole history

Design Principles:
    - Stateless: operates only on the arguments passed in
    - Frequency-aware: a weekly habit's atomic unit is a Monday-start week
    - Deterministic: the reference date is always explicit

Grace periods:
    - daily/custom: an uncompleted reference day does not break the streak
    - weekly: an uncompleted reference week does not break the streak
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    dt_each_week_start,
    dt_parse_iso_date,
    dt_start_of_week,
    dt_week_key,
)
from ..utils.math_utils import calculate_percentage, calculate_rate
from .schedule_engine import ApplicabilityResolver

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..type_defs import CompletionRateResult, RateWindow, StreakResult


class StatisticsEngine:
    """Stateless calculators for habit streaks and completion rates.

    Example:
        streaks = StatisticsEngine.calculate_streaks(habit, ["2026-01-01"], today)
        monthly = StatisticsEngine.calculate_completion_rate(
            habit, dates, 30, today
        )
    """

    # =========================================================================
    # STREAKS
    # =========================================================================

    @classmethod
    def calculate_streaks(
        cls,
        habit: Mapping[str, Any],
        completion_dates: Iterable[str | date],
        reference_date: str | date,
    ) -> StreakResult:
        """Calculate the current and best streak for a habit.

        Args:
            habit: Habit record (frequency, frequency_days, created_at)
            completion_dates: YYYY-MM-DD strings or dates, any order
            reference_date: The "today" the streak is measured against

        Returns:
            StreakResult with current_streak and best_streak

        Raises:
            ValueError: On malformed dates or an unknown frequency
        """
        resolver = ApplicabilityResolver(habit)
        completed = cls.parse_dates(completion_dates)
        reference = dt_parse_iso_date(reference_date)

        if not completed:
            return cls._make_streak_result(0, 0)

        if resolver.is_weekly:
            return cls._calculate_weekly_streaks(completed, reference)

        start = resolver.created_date or min(completed)
        if start > reference:
            start = reference

        applicable_days = resolver.applicable_dates(start, reference)
        if not applicable_days:
            return cls._make_streak_result(0, 0)

        current = 0
        for day in reversed(applicable_days):
            if day == reference and day not in completed:
                continue
            if day not in completed:
                break
            current += 1

        best = cls._longest_run(applicable_days, completed)
        return cls._make_streak_result(current, best)

    @classmethod
    def _calculate_weekly_streaks(
        cls, completed: set[date], reference: date
    ) -> StreakResult:
        """Streaks counted in Monday-start weeks with at least one completion."""
        completed_weeks = {dt_week_key(day) for day in completed}

        week = dt_start_of_week(reference)
        if dt_week_key(week) not in completed_weeks:
            week -= timedelta(weeks=1)

        current = 0
        while dt_week_key(week) in completed_weeks:
            current += 1
            week -= timedelta(weeks=1)

        weeks = dt_each_week_start(min(completed), reference)
        best = cls._longest_run(weeks, {dt_start_of_week(day) for day in completed})
        return cls._make_streak_result(current, best)

    @staticmethod
    def _longest_run(units: list[date], completed: set[date]) -> int:
        """Return the longest run of consecutive completed units."""
        best = 0
        run = 0
        for unit in units:
            if unit in completed:
                run += 1
                best = max(best, run)
            else:
                run = 0
        return best

    # =========================================================================
    # COMPLETION RATE
    # =========================================================================

    @classmethod
    def calculate_completion_rate(
        cls,
        habit: Mapping[str, Any],
        completion_dates: Iterable[str | date],
        window: RateWindow,
        reference_date: str | date,
    ) -> CompletionRateResult:
        """Calculate a habit's completion rate over a window ending at reference.

        Args:
            habit: Habit record
            completion_dates: YYYY-MM-DD strings or dates, any order
            window: Trailing day count (7 covers reference and 6 prior days),
                or "all" for the habit's whole history
            reference_date: Last day of the window

        Returns:
            CompletionRateResult; rate and percentage never exceed 1.0 / 100

        Raises:
            ValueError: On malformed dates, an unknown frequency or a negative window
        """
        resolver = ApplicabilityResolver(habit)
        completed = cls.parse_dates(completion_dates)
        reference = dt_parse_iso_date(reference_date)

        if window == const.WINDOW_ALL:
            first_completion = min(completed) if completed else None
            start = resolver.created_date or first_completion or reference
        elif isinstance(window, int) and not isinstance(window, bool) and window >= 0:
            start = reference - timedelta(days=window - 1)
        else:
            raise ValueError(const.ERROR_NEGATIVE_WINDOW_FMT.format(window))

        if start > reference:
            return cls.make_rate_result(0, 0)

        start = resolver.clip_start(start)
        if start > reference:
            return cls.make_rate_result(0, 0)

        if resolver.is_weekly:
            expected = len(dt_each_week_start(start, reference))
            done = len(
                {dt_week_key(day) for day in completed if start <= day <= reference}
            )
            return cls.make_rate_result(done, expected)

        applicable_days = resolver.applicable_dates(start, reference)
        done = sum(1 for day in applicable_days if day in completed)
        return cls.make_rate_result(done, len(applicable_days))

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def parse_dates(values: Iterable[str | date]) -> set[date]:
        """Parse completion dates into a set, failing fast on malformed input."""
        return {dt_parse_iso_date(value) for value in values}

    @staticmethod
    def make_rate_result(completed: int, expected: int) -> CompletionRateResult:
        """Create a CompletionRateResult with clamped rate and percentage."""
        rate = calculate_rate(completed, expected)
        return {
            "completed": completed,
            "expected": expected,
            "rate": rate,
            "percentage": calculate_percentage(rate),
        }

    @staticmethod
    def _make_streak_result(current: int, best: int) -> StreakResult:
        return {"current_streak": current, "best_streak": best}
