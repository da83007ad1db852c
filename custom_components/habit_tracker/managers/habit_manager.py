"""Habit Manager - Create, edit, archive and reorder habits.

A habit may be filed under one existing category.

Habit creation triggers the restricted habit-count achievement check.
That check is best-effort: a failure is logged and the habit is still
created.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from ..storage_manager import HabitTrackerStorageManager
    from ..type_defs import AchievementDefinition
    from .gamification_manager import GamificationManager

# Fields a caller may set on create/update
_EDITABLE_FIELDS = (
    const.DATA_HABIT_NAME,
    const.DATA_HABIT_DESCRIPTION,
    const.DATA_HABIT_FREQUENCY,
    const.DATA_HABIT_FREQUENCY_DAYS,
    const.DATA_HABIT_COLOR,
    const.DATA_HABIT_ICON,
    const.DATA_HABIT_CATEGORY_ID,
)


class HabitManager(BaseManager):
    """Manager for habit definitions."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        storage: HabitTrackerStorageManager,
        gamification: GamificationManager,
    ) -> None:
        """Initialize the habit manager."""
        super().__init__(hass, entry, storage)
        self._gamification = gamification

    async def async_setup(self) -> None:
        """Set up the manager."""
        const.LOGGER.debug(
            "DEBUG: HabitManager ready with %s active habits",
            self.storage.count_active_habits(),
        )

    def get_habit_or_raise(self, habit_id: str) -> dict[str, Any]:
        """Return a habit or raise HomeAssistantError."""
        habit = self.storage.get_habit(habit_id)
        if habit is None:
            raise HomeAssistantError(const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id))
        return habit

    async def async_create_habit(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a habit at the end of the display order.

        Args:
            data: Validated fields (name, frequency, optional description,
                frequency_days, color, icon, category_id)

        Returns:
            {habit, achievements_unlocked}

        Raises:
            HomeAssistantError: If category_id names an unknown category
        """
        now = dt_now_iso()
        habit: dict[str, Any] = {
            const.DATA_HABIT_ID: str(uuid.uuid4()),
            const.DATA_HABIT_NAME: data[const.DATA_HABIT_NAME],
            const.DATA_HABIT_DESCRIPTION: data.get(const.DATA_HABIT_DESCRIPTION) or None,
            const.DATA_HABIT_FREQUENCY: data[const.DATA_HABIT_FREQUENCY],
            const.DATA_HABIT_FREQUENCY_DAYS: _normalize_days(
                data.get(const.DATA_HABIT_FREQUENCY_DAYS)
            ),
            const.DATA_HABIT_COLOR: data.get(
                const.DATA_HABIT_COLOR, const.DEFAULT_HABIT_COLOR
            ),
            const.DATA_HABIT_ICON: data.get(const.DATA_HABIT_ICON, const.DEFAULT_HABIT_ICON),
            const.DATA_HABIT_CATEGORY_ID: self._resolve_category_id(
                data.get(const.DATA_HABIT_CATEGORY_ID)
            ),
            const.DATA_HABIT_POSITION: self.storage.next_position(),
            const.DATA_HABIT_ARCHIVED: False,
            const.DATA_HABIT_CREATED_AT: now,
            const.DATA_HABIT_UPDATED_AT: now,
        }
        self.storage.upsert_habit(habit)
        await self.async_commit(
            const.SIGNAL_SUFFIX_HABITS_CHANGED, habit_id=habit[const.DATA_HABIT_ID]
        )
        const.LOGGER.info(
            "INFO: Habit '%s' created (%s)",
            habit[const.DATA_HABIT_NAME],
            habit[const.DATA_HABIT_ID],
        )

        achievements: list[AchievementDefinition] = []
        try:
            achievements = await self._gamification.async_process_habit_creation()
        except Exception:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception(
                "Error processing gamification for new habit %s",
                habit[const.DATA_HABIT_ID],
            )

        return {"habit": habit, "achievements_unlocked": achievements}

    async def async_update_habit(
        self, habit_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Apply partial changes to a habit; absent fields are left untouched."""
        habit = self.get_habit_or_raise(habit_id)
        if const.DATA_HABIT_CATEGORY_ID in changes:
            changes = {
                **changes,
                const.DATA_HABIT_CATEGORY_ID: self._resolve_category_id(
                    changes[const.DATA_HABIT_CATEGORY_ID]
                ),
            }
        for field in _EDITABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if field == const.DATA_HABIT_FREQUENCY_DAYS:
                value = _normalize_days(value)
            elif field == const.DATA_HABIT_DESCRIPTION:
                value = value or None
            habit[field] = value
        return await self._async_touch(habit)

    def _resolve_category_id(self, category_id: str | None) -> str | None:
        """Return the id if it names a category; empty means no category."""
        if not category_id:
            return None
        if self.storage.get_category(category_id) is None:
            raise HomeAssistantError(
                const.ERROR_CATEGORY_NOT_FOUND_FMT.format(category_id)
            )
        return category_id

    async def async_archive_habit(self, habit_id: str) -> dict[str, Any]:
        """Hide a habit from daily lists and reports, keeping its history."""
        habit = self.get_habit_or_raise(habit_id)
        habit[const.DATA_HABIT_ARCHIVED] = True
        return await self._async_touch(habit)

    async def async_unarchive_habit(self, habit_id: str) -> dict[str, Any]:
        """Restore an archived habit at the end of the display order."""
        habit = self.get_habit_or_raise(habit_id)
        if habit.get(const.DATA_HABIT_ARCHIVED, False):
            habit[const.DATA_HABIT_POSITION] = self.storage.next_position()
        habit[const.DATA_HABIT_ARCHIVED] = False
        return await self._async_touch(habit)

    async def async_reorder_habits(self, ordered_ids: list[str]) -> None:
        """Set display positions to the order given.

        Raises:
            HomeAssistantError: If any id is unknown (nothing is changed)
        """
        habits = [self.get_habit_or_raise(habit_id) for habit_id in ordered_ids]
        now = dt_now_iso()
        for position, habit in enumerate(habits):
            habit[const.DATA_HABIT_POSITION] = position
            habit[const.DATA_HABIT_UPDATED_AT] = now
        await self.async_commit(const.SIGNAL_SUFFIX_HABITS_CHANGED, habit_id=None)

    async def _async_touch(self, habit: dict[str, Any]) -> dict[str, Any]:
        habit[const.DATA_HABIT_UPDATED_AT] = dt_now_iso()
        await self.async_commit(
            const.SIGNAL_SUFFIX_HABITS_CHANGED, habit_id=habit[const.DATA_HABIT_ID]
        )
        const.LOGGER.debug("DEBUG: Habit '%s' updated", habit[const.DATA_HABIT_ID])
        return habit


def _normalize_days(days: list[int] | None) -> list[int] | None:
    """Deduplicate and sort weekday indices; None stays None."""
    if days is None:
        return None
    return sorted(set(days))
