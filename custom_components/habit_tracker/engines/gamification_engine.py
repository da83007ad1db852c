"""Gamification Engine - Pure logic for XP, levels and achievements.

This engine provides stateless, pure Python functions for:
- XP awarded per completion (base XP plus a streak bonus)
- Level thresholds and level derivation from total XP
- Level progress projection for progress bars
- Achievement qualification against a context snapshot

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static/class methods that operate on passed-in data.

PURITY REQUIREMENT: This engine receives ALL data via the context parameter.
The GamificationManager is responsible for building the context (counts,
streaks, already-unlocked ids) and for persisting XP and unlocks.

Achievement metrics:
- streak: max(current_streak, best_streak) >= 3 / 7 / 14 / 30 / 100
- completions: total completions >= 1 / 10 / 50 / 100 / 500
- habits_created: non-archived habits >= 1 / 5
- habits_in_day: distinct habits completed on the completion date >= 3
- level: level after the XP award >= 5 / 10 / 25
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from .. import const
from ..utils.math_utils import round_half_up

if TYPE_CHECKING:
    from ..type_defs import (
        AchievementCheckContext,
        AchievementDefinition,
        GamificationEvents,
        XpProgress,
    )


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Metric reader signature: (context) -> comparable value
MetricReader = Callable[["AchievementCheckContext"], int]


# =============================================================================
# GAMIFICATION ENGINE
# =============================================================================


class GamificationEngine:
    """Pure logic engine for gamification evaluation.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.

    Evaluation Flow:
        1. Manager computes the streak for the completed habit
        2. Engine prices the completion (calculate_xp_for_completion)
        3. Manager adds XP; engine derives the new level
        4. Manager builds the context; engine returns newly qualifying ids
        5. Manager persists unlocks (idempotent) and fires events
    """

    ACHIEVEMENTS: tuple[AchievementDefinition, ...] = const.ACHIEVEMENTS
    ACHIEVEMENT_MAP: dict[str, AchievementDefinition] = const.ACHIEVEMENT_MAP

    # =========================================================================
    # METRIC READER REGISTRY
    # =========================================================================

    # Maps achievement metric to the context value it is measured against
    _METRIC_READERS: dict[str, MetricReader] = {}

    @classmethod
    def _register_metrics(cls) -> None:
        """Register all metric readers.

        Called once at module load to populate _METRIC_READERS.
        """
        if cls._METRIC_READERS:
            return  # Already registered

        cls._METRIC_READERS = {
            const.ACHIEVEMENT_METRIC_STREAK: cls._read_streak,
            const.ACHIEVEMENT_METRIC_COMPLETIONS: cls._read_completions,
            const.ACHIEVEMENT_METRIC_HABITS_CREATED: cls._read_habits_created,
            const.ACHIEVEMENT_METRIC_HABITS_IN_DAY: cls._read_habits_in_day,
            const.ACHIEVEMENT_METRIC_LEVEL: cls._read_level,
        }

    # =========================================================================
    # XP AND LEVELS
    # =========================================================================

    @staticmethod
    def calculate_xp_for_completion(streak_length: int) -> int:
        """Return XP for one completion given the resulting streak length.

        Examples:
            calculate_xp_for_completion(0) → 10
            calculate_xp_for_completion(5) → 20
        """
        return const.XP_PER_COMPLETION + max(0, streak_length) * (
            const.STREAK_BONUS_MULTIPLIER
        )

    @staticmethod
    def get_xp_for_level(level: int) -> int:
        """Return the total XP needed to reach a level (level 1 needs 0)."""
        if level <= 1:
            return 0
        return level * level * const.XP_LEVEL_BASE

    @classmethod
    def get_level_for_xp(cls, total_xp: int) -> int:
        """Return the highest level reached by total_xp, capped at MAX_LEVEL."""
        level = const.DEFAULT_LEVEL
        while level < const.MAX_LEVEL and total_xp >= cls.get_xp_for_level(level + 1):
            level += 1
        return level

    @classmethod
    def get_xp_progress(cls, total_xp: int) -> XpProgress:
        """Project total XP onto the current level's progress bar."""
        level = cls.get_level_for_xp(total_xp)
        is_max_level = level >= const.MAX_LEVEL
        current_level_xp = cls.get_xp_for_level(level)
        next_level_xp = (
            current_level_xp if is_max_level else cls.get_xp_for_level(level + 1)
        )
        xp_into_level = total_xp - current_level_xp
        xp_needed_for_next = next_level_xp - current_level_xp

        if is_max_level or xp_needed_for_next <= 0:
            progress_percent = 100
        else:
            progress_percent = max(
                0, min(100, round_half_up(xp_into_level / xp_needed_for_next * 100))
            )

        return {
            "level": level,
            "current_level_xp": current_level_xp,
            "next_level_xp": next_level_xp,
            "xp_into_level": xp_into_level,
            "xp_needed_for_next": xp_needed_for_next,
            "progress_percent": progress_percent,
            "is_max_level": is_max_level,
        }

    # =========================================================================
    # ACHIEVEMENTS
    # =========================================================================

    @classmethod
    def check_achievements(cls, context: AchievementCheckContext) -> list[str]:
        """Return newly qualifying achievement ids, in catalog order.

        Ids already present in context["already_unlocked"] are never returned,
        so re-running with an updated unlocked set yields no duplicates.
        """
        return cls._check(context, (entry["id"] for entry in cls.ACHIEVEMENTS))

    @classmethod
    def check_habit_creation_achievements(
        cls, context: AchievementCheckContext
    ) -> list[str]:
        """Return newly qualifying habit-count achievements only.

        A creation event carries no completion or streak context, so only
        habit-creator and collector are evaluated.
        """
        return cls._check(context, const.HABIT_CREATION_ACHIEVEMENTS)

    @classmethod
    def _check(
        cls, context: AchievementCheckContext, achievement_ids: Iterable[str]
    ) -> list[str]:
        already_unlocked = context["already_unlocked"]
        newly_unlocked: list[str] = []
        for achievement_id in achievement_ids:
            if achievement_id in already_unlocked:
                continue
            metric, threshold = const.ACHIEVEMENT_RULES[achievement_id]
            if cls._METRIC_READERS[metric](context) >= threshold:
                newly_unlocked.append(achievement_id)
        return newly_unlocked

    @classmethod
    def get_definitions(
        cls, achievement_ids: Iterable[str]
    ) -> list[AchievementDefinition]:
        """Resolve ids to catalog entries, skipping unknown ids."""
        return [
            cls.ACHIEVEMENT_MAP[achievement_id]
            for achievement_id in achievement_ids
            if achievement_id in cls.ACHIEVEMENT_MAP
        ]

    @staticmethod
    def build_completion_events(
        *,
        xp_gained: int,
        new_total_xp: int,
        previous_level: int,
        new_level: int,
        achievements_unlocked: list[AchievementDefinition],
    ) -> GamificationEvents:
        """Create the GamificationEvents payload returned to callers."""
        return {
            "xp_gained": xp_gained,
            "new_total_xp": new_total_xp,
            "new_level": new_level,
            "leveled_up": new_level > previous_level,
            "previous_level": previous_level,
            "achievements_unlocked": achievements_unlocked,
        }

    # =========================================================================
    # METRIC READERS
    # =========================================================================

    @staticmethod
    def _read_streak(context: AchievementCheckContext) -> int:
        return max(context["current_streak"], context["best_streak"])

    @staticmethod
    def _read_completions(context: AchievementCheckContext) -> int:
        return context["total_completions"]

    @staticmethod
    def _read_habits_created(context: AchievementCheckContext) -> int:
        return context["habits_created"]

    @staticmethod
    def _read_habits_in_day(context: AchievementCheckContext) -> int:
        return context["habits_completed_on_date"]

    @staticmethod
    def _read_level(context: AchievementCheckContext) -> int:
        return context["current_level"]


# Register metric readers on module load
GamificationEngine._register_metrics()  # pylint: disable=protected-access
