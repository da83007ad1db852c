"""Gamification Manager - XP awards and achievement unlocks.

This manager handles the stateful side of gamification:
- Completion events: streak lookup, XP award, level derivation, unlocks
- Habit-creation events: restricted habit-count achievement check
- Status reads: level progress and the achievement catalog with unlock state

ARCHITECTURE:
- GamificationManager = STATEFUL orchestration (storage, bus events)
- GamificationEngine = Pure evaluation logic (STATELESS)

XP is only ever added. Removing a completion never takes XP back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.gamification_engine import GamificationEngine
from ..engines.statistics_engine import StatisticsEngine
from ..utils.dt_utils import dt_parse_iso_date, dt_today_local
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date

    from ..type_defs import (
        AchievementCheckContext,
        AchievementDefinition,
        GamificationEvents,
    )


class GamificationManager(BaseManager):
    """Manager for XP, levels and achievements.

    Responsibilities:
    - Award XP for a recorded completion (monotonic, never decremented)
    - Persist level redundantly alongside total XP
    - Unlock achievements at most once and fire bus events
    """

    async def async_setup(self) -> None:
        """Set up the manager."""
        stats = self.storage.get_or_create_user_stats()
        const.LOGGER.debug(
            "DEBUG: GamificationManager ready: %s XP, level %s",
            stats[const.DATA_USER_STATS_TOTAL_XP],
            stats[const.DATA_USER_STATS_LEVEL],
        )

    # =========================================================================
    # EVENT PROCESSING
    # =========================================================================

    async def async_process_completion(
        self, habit_id: str, completed_date: str | date
    ) -> GamificationEvents:
        """Run gamification for a completion that has already been saved.

        Args:
            habit_id: Habit that was completed
            completed_date: Date of the completion (YYYY-MM-DD or date)

        Returns:
            GamificationEvents describing XP, level change and new unlocks
        """
        day = dt_parse_iso_date(completed_date)
        stats = self.storage.get_or_create_user_stats()
        old_total_xp = stats[const.DATA_USER_STATS_TOTAL_XP]
        previous_level = GamificationEngine.get_level_for_xp(old_total_xp)

        habit = self.storage.get_habit(habit_id)
        if habit is None:
            const.LOGGER.warning(
                "WARNING: Gamification skipped, habit '%s' not found", habit_id
            )
            return GamificationEngine.build_completion_events(
                xp_gained=0,
                new_total_xp=old_total_xp,
                previous_level=previous_level,
                new_level=previous_level,
                achievements_unlocked=[],
            )

        # Streak as of now, including the completion just recorded
        streaks = StatisticsEngine.calculate_streaks(
            habit, self.storage.get_completion_dates(habit_id), dt_today_local()
        )
        xp_gained = GamificationEngine.calculate_xp_for_completion(
            streaks["current_streak"]
        )
        new_total_xp = old_total_xp + xp_gained
        new_level = GamificationEngine.get_level_for_xp(new_total_xp)
        self.storage.set_user_stats(new_total_xp, new_level)

        context: AchievementCheckContext = {
            "already_unlocked": self.storage.get_unlocked_achievement_ids(),
            "total_completions": self.storage.count_completions(),
            "current_streak": streaks["current_streak"],
            "best_streak": streaks["best_streak"],
            "habits_created": self.storage.count_active_habits(),
            "habits_completed_on_date": self.storage.count_habits_completed_on(day),
            "current_level": new_level,
        }
        unlocked = self._unlock(GamificationEngine.check_achievements(context))
        await self.storage.async_save()

        const.LOGGER.debug(
            "DEBUG: Awarded %s XP for habit '%s' (streak %s), total %s",
            xp_gained,
            habit_id,
            streaks["current_streak"],
            new_total_xp,
        )

        if new_level > previous_level:
            const.LOGGER.info(
                "INFO: Level up: %s -> %s (%s XP)",
                previous_level,
                new_level,
                new_total_xp,
            )
            self.fire_event(
                const.EVENT_LEVEL_UP,
                previous_level=previous_level,
                new_level=new_level,
                total_xp=new_total_xp,
            )

        return GamificationEngine.build_completion_events(
            xp_gained=xp_gained,
            new_total_xp=new_total_xp,
            previous_level=previous_level,
            new_level=new_level,
            achievements_unlocked=unlocked,
        )

    async def async_process_habit_creation(self) -> list[AchievementDefinition]:
        """Check habit-count achievements after a habit is created."""
        stats = self.storage.get_or_create_user_stats()
        context: AchievementCheckContext = {
            "already_unlocked": self.storage.get_unlocked_achievement_ids(),
            "total_completions": 0,
            "current_streak": 0,
            "best_streak": 0,
            "habits_created": self.storage.count_active_habits(),
            "habits_completed_on_date": 0,
            "current_level": stats[const.DATA_USER_STATS_LEVEL],
        }
        unlocked = self._unlock(
            GamificationEngine.check_habit_creation_achievements(context)
        )
        if unlocked:
            await self.storage.async_save()
        return unlocked

    def _unlock(self, achievement_ids: list[str]) -> list[AchievementDefinition]:
        """Persist unlocks (idempotent) and fire one bus event per new unlock."""
        unlocked: list[AchievementDefinition] = []
        for definition in GamificationEngine.get_definitions(achievement_ids):
            inserted = self.storage.insert_achievement(
                definition["id"],
                {const.DATA_ACHIEVEMENT_METADATA_NAME: definition["name"]},
            )
            if not inserted:
                continue
            unlocked.append(definition)
            const.LOGGER.info("INFO: Achievement unlocked: %s", definition["id"])
            self.fire_event(
                const.EVENT_ACHIEVEMENT_UNLOCKED,
                achievement_id=definition["id"],
                name=definition["name"],
                category=definition["category"],
            )
        return unlocked

    # =========================================================================
    # READS
    # =========================================================================

    def get_status(self) -> dict[str, Any]:
        """Return total XP, level progress and unlocked achievement count."""
        stats = self.storage.get_or_create_user_stats()
        total_xp = stats[const.DATA_USER_STATS_TOTAL_XP]
        return {
            "total_xp": total_xp,
            **GamificationEngine.get_xp_progress(total_xp),
            "achievements_unlocked": len(self.storage.get_unlocked_achievements()),
            "achievements_total": len(GamificationEngine.ACHIEVEMENTS),
        }

    def get_achievements(self) -> list[dict[str, Any]]:
        """Return the catalog with unlocked flags and timestamps, catalog order."""
        unlocked = self.storage.get_unlocked_achievements()
        achievements: list[dict[str, Any]] = []
        for definition in GamificationEngine.ACHIEVEMENTS:
            row = unlocked.get(definition["id"])
            achievements.append(
                {
                    **definition,
                    "unlocked": row is not None,
                    "unlocked_at": (
                        row[const.DATA_ACHIEVEMENT_UNLOCKED_AT] if row else None
                    ),
                }
            )
        return achievements
