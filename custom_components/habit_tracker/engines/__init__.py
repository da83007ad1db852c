"""Engine modules for Habit Tracker integration.

Contains pure computation engines (no Home Assistant imports):
- schedule_engine: Habit applicability by recurrence rule
- statistics_engine: Streaks and completion rates
- report_engine: Heatmap, summaries, trends, comparison, weekday patterns
- gamification_engine: XP, levels and achievement qualification
"""

# Use relative imports within package to avoid mypy module resolution issues
from .gamification_engine import GamificationEngine
from .report_engine import ReportEngine, group_completions_by_habit
from .schedule_engine import ApplicabilityResolver
from .statistics_engine import StatisticsEngine

__all__ = [
    "ApplicabilityResolver",
    "GamificationEngine",
    "ReportEngine",
    "StatisticsEngine",
    "group_completions_by_habit",
]
