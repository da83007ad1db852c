"""Type definitions for Habit Tracker data structures.

HYBRID APPROACH (TypedDict + dict[str, Any])
============================================

1. **TypedDict for STATIC structures** (fixed keys known at design time):
   - Entity definitions: HabitData, CategoryData, CompletionRecord, UserStatsData
   - Engine results: StreakResult, CompletionRateResult, report rows
   - Gamification payloads: XpProgress, GamificationEvents

2. **dict[str, Any] for DYNAMIC structures** (keys determined at runtime):
   - Storage buckets keyed by habit id / calendar date / achievement id

IMPORTANT: This file must NOT import from managers or storage to avoid
circular dependencies. Only typing machinery is imported here.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime checks (.get() defaults,
validation) stay in the managers and services.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitId = str  # UUID string
CategoryId = str  # UUID string
AchievementId = str  # Catalog slug, e.g. "first-flame"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"
Frequency = Literal["daily", "weekly", "custom"]
RateWindow = int | Literal["all"]


# =============================================================================
# Entities
# =============================================================================


class HabitData(TypedDict):
    """Type definition for a habit.

    frequency_days holds weekday indices (0=Sunday .. 6=Saturday) and is
    only meaningful when frequency is "custom".
    """

    id: HabitId
    name: str
    description: NotRequired[str | None]
    frequency: Frequency
    frequency_days: list[int] | None
    color: str
    icon: str
    category_id: NotRequired[CategoryId | None]
    position: NotRequired[int]
    archived: NotRequired[bool]
    created_at: ISODatetime | None
    updated_at: NotRequired[ISODatetime]


class CategoryData(TypedDict):
    """A named group habits can be filed under; color is optional."""

    id: CategoryId
    name: str
    color: str | None
    created_at: ISODatetime


class CompletionRecord(TypedDict):
    """A single (habit, date) completion as passed to report generators."""

    habit_id: HabitId
    completed_date: ISODate
    notes: NotRequired[str | None]
    created_at: NotRequired[ISODatetime]


class UserStatsData(TypedDict):
    """Single user-stats row; total_xp never decreases."""

    total_xp: int
    level: int
    updated_at: ISODatetime | None


class UnlockedAchievement(TypedDict):
    """A persisted achievement unlock."""

    achievement_id: AchievementId
    unlocked_at: ISODatetime
    metadata: dict[str, Any]


# =============================================================================
# Statistics Engine Results
# =============================================================================


class StreakResult(TypedDict):
    """Current and best streak, in days (daily/custom) or weeks (weekly)."""

    current_streak: int
    best_streak: int


class CompletionRateResult(TypedDict):
    """Completion rate over a window. rate <= 1.0, percentage <= 100."""

    completed: int
    expected: int
    rate: float
    percentage: int


# =============================================================================
# Report Engine Results
# =============================================================================


class HeatmapDay(TypedDict):
    """One calendar cell of the completion heatmap."""

    date: ISODate
    count: int
    day_of_week: int  # 0=Sunday .. 6=Saturday
    month: int  # 1..12
    is_today: bool


class HabitPeriodStats(TypedDict):
    """Per-habit breakdown inside a weekly or monthly summary."""

    habit_id: HabitId
    habit_name: str
    habit_color: str
    completed: int
    expected: int
    rate: float


class WeeklySummary(TypedDict):
    """Aggregate completion stats for one Monday-start week."""

    week_start: ISODate
    week_end: ISODate
    week_label: str
    total_completed: int
    total_expected: int
    rate: float
    percentage: int
    per_habit: list[HabitPeriodStats]


class MonthlySummary(TypedDict):
    """Aggregate completion stats for one calendar month."""

    month_start: ISODate
    month_label: str
    total_completed: int
    total_expected: int
    rate: float
    percentage: int
    per_habit: list[HabitPeriodStats]


class TrendDataPoint(TypedDict):
    """Weekly trend point (date is the week's Monday)."""

    date: ISODate
    label: str
    completed: int
    expected: int
    rate: float
    percentage: int


class HabitComparisonItem(TypedDict):
    """One habit ranked by its 30-day completion rate."""

    habit_id: HabitId
    habit_name: str
    habit_color: str
    habit_icon: str
    completed: int
    expected: int
    rate: float
    percentage: int


class HabitComparison(TypedDict):
    """Best and struggling habits (disjoint by habit id)."""

    best: list[HabitComparisonItem]
    struggling: list[HabitComparisonItem]


class DayOfWeekData(TypedDict):
    """Completion rate for one weekday across all non-weekly habits."""

    day: str  # "Mon" .. "Sun"
    day_index: int  # 0=Sunday .. 6=Saturday
    completed: int
    expected: int
    rate: float
    percentage: int


# =============================================================================
# Gamification Engine Types
# =============================================================================


class AchievementDefinition(TypedDict):
    """Static catalog entry."""

    id: AchievementId
    name: str
    description: str
    category: Literal["streak", "completion", "variety", "level"]
    icon: str


class AchievementCheckContext(TypedDict):
    """Snapshot the manager builds before evaluating achievements."""

    already_unlocked: set[AchievementId]
    total_completions: int
    current_streak: int
    best_streak: int
    habits_created: int
    habits_completed_on_date: int
    current_level: int


class XpProgress(TypedDict):
    """Level progress derived from total XP."""

    level: int
    current_level_xp: int
    next_level_xp: int
    xp_into_level: int
    xp_needed_for_next: int
    progress_percent: int
    is_max_level: bool


class GamificationEvents(TypedDict):
    """Outcome of processing one completion."""

    xp_gained: int
    new_total_xp: int
    new_level: int
    leveled_up: bool
    previous_level: int
    achievements_unlocked: list[AchievementDefinition]
