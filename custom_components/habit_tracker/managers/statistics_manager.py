"""Statistics Manager - Read-side statistics and analytics.

Composes the statistics and report engines with a storage snapshot:
- Per-habit stats (streaks plus 7-day, 30-day and all-time rates)
- Dashboard analytics (heatmap, summaries, trend, comparison, weekday
  pattern, per-habit stats and overall totals)
- The habit list for a given date with each habit's completion and streaks

Every read is recomputed from storage; nothing is retained between calls.
Window sizes come from the config entry options.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.report_engine import ReportEngine
from ..engines.schedule_engine import ApplicabilityResolver
from ..engines.statistics_engine import StatisticsEngine
from ..utils.dt_utils import dt_format_iso_date, dt_today_local
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date


class StatisticsManager(BaseManager):
    """Manager for statistics reads."""

    async def async_setup(self) -> None:
        """Log the report options in effect."""
        const.LOGGER.debug("DEBUG: Statistics manager options: %s", self.options)

    @property
    def options(self) -> dict[str, Any]:
        """Report window options merged over defaults."""
        return {**const.DEFAULT_OPTIONS, **self.entry.options}

    def get_habit_stats(
        self, habit: dict[str, Any], reference: date | None = None
    ) -> dict[str, Any]:
        """Return streaks and completion rates for one habit."""
        reference = reference or dt_today_local()
        habit_id = habit[const.DATA_HABIT_ID]
        dates = self.storage.get_completion_dates(habit_id)
        return {
            "habit_id": habit_id,
            "habit_name": habit[const.DATA_HABIT_NAME],
            "reference_date": dt_format_iso_date(reference),
            "total_completions": len(dates),
            **StatisticsEngine.calculate_streaks(habit, dates, reference),
            "rate_7_days": StatisticsEngine.calculate_completion_rate(
                habit, dates, const.RATE_WINDOW_WEEK, reference
            ),
            "rate_30_days": StatisticsEngine.calculate_completion_rate(
                habit, dates, const.RATE_WINDOW_MONTH, reference
            ),
            "rate_all_time": StatisticsEngine.calculate_completion_rate(
                habit, dates, const.WINDOW_ALL, reference
            ),
        }

    def get_analytics(self, reference: date | None = None) -> dict[str, Any]:
        """Return every dashboard report for active habits from one snapshot."""
        reference = reference or dt_today_local()
        options = self.options
        habits = self.storage.get_active_habits()
        completions = self.storage.get_completion_records(
            {habit[const.DATA_HABIT_ID] for habit in habits}
        )
        habit_stats = [self.get_habit_stats(habit, reference) for habit in habits]

        heatmap = ReportEngine.generate_heatmap(completions, reference)
        return {
            "reference_date": dt_format_iso_date(reference),
            "heatmap": heatmap,
            "heatmap_max_count": ReportEngine.get_heatmap_max_count(heatmap),
            "weekly_summaries": ReportEngine.generate_weekly_summaries(
                habits, completions, reference, options[const.CONF_SUMMARY_WEEKS]
            ),
            "monthly_summaries": ReportEngine.generate_monthly_summaries(
                habits, completions, reference, options[const.CONF_SUMMARY_MONTHS]
            ),
            "trend": ReportEngine.generate_trend_data(
                habits, completions, reference, options[const.CONF_TREND_WEEKS]
            ),
            "comparison": ReportEngine.calculate_habit_comparison(
                habits, completions, reference, options[const.CONF_COMPARISON_TOP_N]
            ),
            "day_of_week": ReportEngine.calculate_day_of_week_patterns(
                habits, completions, reference, options[const.CONF_PATTERN_DAYS]
            ),
            "habit_stats": habit_stats,
            "overall": self._summarize_overall(habit_stats, len(completions)),
        }

    @staticmethod
    def _summarize_overall(
        habit_stats: list[dict[str, Any]], total_completions: int
    ) -> dict[str, Any]:
        """Totals across active habits and the habit holding the best streak.

        The first habit in display order wins ties; a best streak of zero
        reports no habit.
        """
        best: dict[str, Any] | None = None
        for stats in habit_stats:
            if best is None or stats["best_streak"] > best["best_streak"]:
                best = stats

        return {
            "total_habits": len(habit_stats),
            "total_completions": total_completions,
            "overall_rate_7_days": StatisticsEngine.make_rate_result(
                sum(stats["rate_7_days"]["completed"] for stats in habit_stats),
                sum(stats["rate_7_days"]["expected"] for stats in habit_stats),
            ),
            "best_streak_habit": (
                {
                    "habit_id": best["habit_id"],
                    "habit_name": best["habit_name"],
                    "best_streak": best["best_streak"],
                }
                if best is not None and best["best_streak"] > 0
                else None
            ),
        }

    def get_habits_for_date(self, day: date | None = None) -> list[dict[str, Any]]:
        """Return active habits scheduled on a date with their completion, if any.

        Weekly habits are listed every day. Streaks are measured as of the
        requested date.
        """
        day = day or dt_today_local()
        rows = []
        for habit in self.storage.get_active_habits():
            if not ApplicabilityResolver(habit).is_scheduled(day):
                continue
            habit_id = habit[const.DATA_HABIT_ID]
            rows.append(
                {
                    **habit,
                    "completion": self.storage.get_completion(habit_id, day),
                    **StatisticsEngine.calculate_streaks(
                        habit, self.storage.get_completion_dates(habit_id), day
                    ),
                }
            )
        return rows
