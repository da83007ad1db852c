"""Report Engine - Aggregate analytics across all habits.

This engine turns a snapshot of habits and completion records into the
read-only report rows shown on the analytics dashboard:
- Heatmap of daily completion counts (plus max count and intensity levels)
- Weekly and monthly summaries with per-habit breakdowns
- Weekly trend series
- Best vs struggling habit comparison (30-day rate)
- Day-of-week consistency pattern

ARCHITECTURE: Pure logic with NO Home Assistant dependencies. Every report is
self-contained: it re-derives per-habit applicability from the habit records
and never shares state between calls. Missing data yields zero-valued rows,
never an exception.

Window clipping (weekly/monthly/trend):
    - A window still in progress ends at the reference date
    - A habit created after the window's effective end is skipped
    - A habit created inside the window is counted from its creation date
    - Weekly habits count one unit per overlapping week with >= 1 completion
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    dt_each_day,
    dt_each_week_start,
    dt_end_of_month,
    dt_end_of_week,
    dt_format_iso_date,
    dt_month_label,
    dt_parse_iso_date,
    dt_short_label,
    dt_start_of_month,
    dt_start_of_week,
    dt_subtract_months,
    dt_week_range_label,
    dt_weekday_index,
    dt_weekday_short_label,
)
from ..utils.math_utils import calculate_percentage, calculate_rate
from .schedule_engine import ApplicabilityResolver
from .statistics_engine import StatisticsEngine

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from ..type_defs import (
        DayOfWeekData,
        HabitComparison,
        HabitComparisonItem,
        HabitPeriodStats,
        HeatmapDay,
        MonthlySummary,
        TrendDataPoint,
        WeeklySummary,
    )

# Monday -> Sunday, as weekday indices (0=Sunday)
WEEKDAY_DISPLAY_ORDER = (1, 2, 3, 4, 5, 6, 0)


class ReportEngine:
    """Stateless generators for analytics reports.

    All methods are static and take the full habit list plus a flat list of
    completion records ({habit_id, completed_date}).
    """

    # =========================================================================
    # HEATMAP
    # =========================================================================

    @staticmethod
    def generate_heatmap(
        completions: Iterable[Mapping[str, Any]],
        reference_date: str | date,
        num_days: int = const.DEFAULT_HEATMAP_DAYS,
    ) -> list[HeatmapDay]:
        """Return one cell per day for the trailing window ending at reference.

        Counts are raw completion records per date across all habits.
        """
        _require_non_negative("num_days", num_days)
        reference = dt_parse_iso_date(reference_date)
        counts = Counter(
            dt_parse_iso_date(record[const.DATA_COMPLETION_DATE])
            for record in completions
        )

        return [
            {
                "date": dt_format_iso_date(day),
                "count": counts.get(day, 0),
                "day_of_week": dt_weekday_index(day),
                "month": day.month,
                "is_today": day == reference,
            }
            for day in dt_each_day(reference - timedelta(days=num_days - 1), reference)
        ]

    @staticmethod
    def get_heatmap_max_count(days: Sequence[Mapping[str, Any]]) -> int:
        """Return the highest daily count, never less than 1."""
        return max([1, *(day["count"] for day in days)])

    @staticmethod
    def get_heatmap_level(count: int, max_count: int) -> int:
        """Quantize a daily count into an intensity level 0..4."""
        if count <= 0 or max_count <= 0:
            return 0
        ratio = count / max_count
        for level, threshold in enumerate(const.HEATMAP_LEVEL_THRESHOLDS, start=1):
            if ratio <= threshold:
                return level
        return len(const.HEATMAP_LEVEL_THRESHOLDS) + 1

    # =========================================================================
    # PERIOD SUMMARIES
    # =========================================================================

    @classmethod
    def generate_weekly_summaries(
        cls,
        habits: Sequence[Mapping[str, Any]],
        completions: Iterable[Mapping[str, Any]],
        reference_date: str | date,
        num_weeks: int = const.DEFAULT_SUMMARY_WEEKS,
    ) -> list[WeeklySummary]:
        """Summaries for the last N weeks, most recent week first."""
        _require_non_negative("num_weeks", num_weeks)
        reference = dt_parse_iso_date(reference_date)
        by_habit = group_completions_by_habit(completions)

        summaries: list[WeeklySummary] = []
        for offset in range(num_weeks):
            anchor = reference - timedelta(weeks=offset)
            week_start = dt_start_of_week(anchor)
            week_end = min(dt_end_of_week(anchor), reference)
            completed, expected, per_habit = cls._summarize_window(
                habits, by_habit, week_start, week_end
            )
            rate = calculate_rate(completed, expected)
            summaries.append(
                {
                    "week_start": dt_format_iso_date(week_start),
                    "week_end": dt_format_iso_date(week_end),
                    "week_label": dt_week_range_label(week_start, week_end),
                    "total_completed": completed,
                    "total_expected": expected,
                    "rate": rate,
                    "percentage": calculate_percentage(rate),
                    "per_habit": per_habit,
                }
            )
        return summaries

    @classmethod
    def generate_monthly_summaries(
        cls,
        habits: Sequence[Mapping[str, Any]],
        completions: Iterable[Mapping[str, Any]],
        reference_date: str | date,
        num_months: int = const.DEFAULT_SUMMARY_MONTHS,
    ) -> list[MonthlySummary]:
        """Summaries for the last N calendar months, most recent month first."""
        _require_non_negative("num_months", num_months)
        reference = dt_parse_iso_date(reference_date)
        by_habit = group_completions_by_habit(completions)

        summaries: list[MonthlySummary] = []
        for offset in range(num_months):
            anchor = dt_subtract_months(reference, offset)
            month_start = dt_start_of_month(anchor)
            month_end = min(dt_end_of_month(anchor), reference)
            completed, expected, per_habit = cls._summarize_window(
                habits, by_habit, month_start, month_end
            )
            rate = calculate_rate(completed, expected)
            summaries.append(
                {
                    "month_start": dt_format_iso_date(month_start),
                    "month_label": dt_month_label(month_start),
                    "total_completed": completed,
                    "total_expected": expected,
                    "rate": rate,
                    "percentage": calculate_percentage(rate),
                    "per_habit": per_habit,
                }
            )
        return summaries

    @classmethod
    def generate_trend_data(
        cls,
        habits: Sequence[Mapping[str, Any]],
        completions: Iterable[Mapping[str, Any]],
        reference_date: str | date,
        num_weeks: int = const.DEFAULT_TREND_WEEKS,
    ) -> list[TrendDataPoint]:
        """Weekly aggregate rate for the last N weeks, oldest week first."""
        _require_non_negative("num_weeks", num_weeks)
        reference = dt_parse_iso_date(reference_date)
        by_habit = group_completions_by_habit(completions)

        points: list[TrendDataPoint] = []
        for offset in reversed(range(num_weeks)):
            anchor = reference - timedelta(weeks=offset)
            week_start = dt_start_of_week(anchor)
            week_end = min(dt_end_of_week(anchor), reference)
            completed, expected, _ = cls._summarize_window(
                habits, by_habit, week_start, week_end
            )
            rate = calculate_rate(completed, expected)
            points.append(
                {
                    "date": dt_format_iso_date(week_start),
                    "label": dt_short_label(week_start),
                    "completed": completed,
                    "expected": expected,
                    "rate": rate,
                    "percentage": calculate_percentage(rate),
                }
            )
        return points

    # =========================================================================
    # HABIT COMPARISON
    # =========================================================================

    @staticmethod
    def calculate_habit_comparison(
        habits: Sequence[Mapping[str, Any]],
        completions: Iterable[Mapping[str, Any]],
        reference_date: str | date,
        top_n: int = const.DEFAULT_COMPARISON_TOP_N,
    ) -> HabitComparison:
        """Rank habits by 30-day completion rate.

        best: the top N by percentage (ties keep input order).
        struggling: the bottom N among habits with a nonzero expected count,
        worst first, excluding any habit already in best.
        """
        _require_non_negative("top_n", top_n)
        by_habit = group_completions_by_habit(completions)

        items: list[HabitComparisonItem] = []
        for habit in habits:
            result = StatisticsEngine.calculate_completion_rate(
                habit,
                by_habit.get(habit[const.DATA_HABIT_ID], set()),
                const.COMPARISON_WINDOW_DAYS,
                reference_date,
            )
            items.append(
                {
                    "habit_id": habit[const.DATA_HABIT_ID],
                    "habit_name": habit[const.DATA_HABIT_NAME],
                    "habit_color": habit.get(
                        const.DATA_HABIT_COLOR, const.DEFAULT_HABIT_COLOR
                    ),
                    "habit_icon": habit.get(
                        const.DATA_HABIT_ICON, const.DEFAULT_HABIT_ICON
                    ),
                    "completed": result["completed"],
                    "expected": result["expected"],
                    "rate": result["rate"],
                    "percentage": result["percentage"],
                }
            )

        if top_n == 0:
            return {"best": [], "struggling": []}

        # sorted() is stable with reverse=True, so ties keep input order
        ranked = sorted(items, key=lambda item: item["percentage"], reverse=True)
        best = ranked[:top_n]
        best_ids = {item["habit_id"] for item in best}
        tracked = [item for item in ranked if item["expected"] > 0]
        struggling = [
            item
            for item in reversed(tracked[-top_n:])
            if item["habit_id"] not in best_ids
        ]
        return {"best": best, "struggling": struggling}

    # =========================================================================
    # DAY-OF-WEEK PATTERN
    # =========================================================================

    @staticmethod
    def calculate_day_of_week_patterns(
        habits: Sequence[Mapping[str, Any]],
        completions: Iterable[Mapping[str, Any]],
        reference_date: str | date,
        num_days: int = const.DEFAULT_PATTERN_DAYS,
    ) -> list[DayOfWeekData]:
        """Completion rate per weekday over a trailing window, Monday first.

        Weekly habits are excluded; a weekly expectation cannot be attributed
        to a single weekday.
        """
        _require_non_negative("num_days", num_days)
        reference = dt_parse_iso_date(reference_date)
        by_habit = group_completions_by_habit(completions)
        days = dt_each_day(reference - timedelta(days=num_days - 1), reference)

        completed = [0] * 7
        expected = [0] * 7
        for habit in habits:
            resolver = ApplicabilityResolver(habit)
            if resolver.is_weekly:
                continue
            done = by_habit.get(habit[const.DATA_HABIT_ID], set())
            for day in days:
                if not resolver.is_applicable(day):
                    continue
                index = dt_weekday_index(day)
                expected[index] += 1
                if day in done:
                    completed[index] += 1

        patterns: list[DayOfWeekData] = []
        for index in WEEKDAY_DISPLAY_ORDER:
            rate = calculate_rate(completed[index], expected[index])
            patterns.append(
                {
                    "day": dt_weekday_short_label(index),
                    "day_index": index,
                    "completed": completed[index],
                    "expected": expected[index],
                    "rate": rate,
                    "percentage": calculate_percentage(rate),
                }
            )
        return patterns

    # =========================================================================
    # HELPERS
    # =========================================================================

    @classmethod
    def _summarize_window(
        cls,
        habits: Sequence[Mapping[str, Any]],
        by_habit: Mapping[str, set[date]],
        start: date,
        end: date,
    ) -> tuple[int, int, list[HabitPeriodStats]]:
        """Aggregate completed/expected across habits for [start, end].

        Returns:
            (total_completed, total_expected, per_habit rows)
        """
        total_completed = 0
        total_expected = 0
        per_habit: list[HabitPeriodStats] = []

        for habit in habits:
            resolver = ApplicabilityResolver(habit)
            created = resolver.created_date
            if created is not None and created > end:
                continue

            done = by_habit.get(habit[const.DATA_HABIT_ID], set())
            completed, expected = cls._count_habit_window(
                resolver, done, resolver.clip_start(start), end
            )
            per_habit.append(
                {
                    "habit_id": habit[const.DATA_HABIT_ID],
                    "habit_name": habit[const.DATA_HABIT_NAME],
                    "habit_color": habit.get(
                        const.DATA_HABIT_COLOR, const.DEFAULT_HABIT_COLOR
                    ),
                    "completed": completed,
                    "expected": expected,
                    "rate": calculate_rate(completed, expected),
                }
            )
            total_completed += completed
            total_expected += expected

        return total_completed, total_expected, per_habit

    @staticmethod
    def _count_habit_window(
        resolver: ApplicabilityResolver, done: set[date], start: date, end: date
    ) -> tuple[int, int]:
        """Return (completed, expected) for one habit over a clipped window."""
        if resolver.is_weekly:
            completed = 0
            weeks = dt_each_week_start(start, end)
            for week_start in weeks:
                week_first = max(week_start, start)
                week_last = min(week_start + timedelta(days=6), end)
                if any(week_first <= day <= week_last for day in done):
                    completed += 1
            return completed, len(weeks)

        applicable_days = resolver.applicable_dates(start, end)
        return sum(1 for day in applicable_days if day in done), len(applicable_days)


def group_completions_by_habit(
    completions: Iterable[Mapping[str, Any]],
) -> dict[str, set[date]]:
    """Group completion records into {habit_id: {completed dates}}."""
    grouped: dict[str, set[date]] = defaultdict(set)
    for record in completions:
        grouped[record[const.DATA_COMPLETION_HABIT_ID]].add(
            dt_parse_iso_date(record[const.DATA_COMPLETION_DATE])
        )
    return dict(grouped)


def _require_non_negative(name: str, value: int) -> None:
    """Fail fast on negative window sizes and counts."""
    if value < 0:
        raise ValueError(const.ERROR_NEGATIVE_COUNT_FMT.format(name, value))
