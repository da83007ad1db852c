"""Completion Manager - Toggle and annotate habit completions.

The completion write is the primary operation; gamification runs afterwards
as a best-effort side effect. A gamification failure is logged and the
completion still stands.

Writes are serialized behind one asyncio.Lock so the check-then-insert or
check-then-delete against storage can never interleave on the event loop.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError

from .. import const
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from ..storage_manager import HabitTrackerStorageManager
    from ..type_defs import GamificationEvents
    from .gamification_manager import GamificationManager


class CompletionManager(BaseManager):
    """Manager for completion writes."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        storage: HabitTrackerStorageManager,
        gamification: GamificationManager,
    ) -> None:
        """Initialize the completion manager.

        Args:
            hass: Home Assistant instance
            entry: Config entry owning this integration instance
            storage: Storage manager
            gamification: Manager run after each new completion
        """
        super().__init__(hass, entry, storage)
        self._gamification = gamification
        self._lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Set up the manager."""
        const.LOGGER.debug(
            "DEBUG: CompletionManager ready with %s completions",
            self.storage.count_completions(),
        )

    async def async_toggle_completion(
        self, habit_id: str, day: date
    ) -> dict[str, Any]:
        """Complete the habit on a date, or un-complete it if already done.

        Returns:
            {completed, completion, gamification}; gamification is None when
            un-completing or when gamification processing failed

        Raises:
            HomeAssistantError: If the habit does not exist
        """
        self._require_habit(habit_id)

        async with self._lock:
            if self.storage.remove_completion(habit_id, day):
                await self.storage.async_save()
                const.LOGGER.info(
                    "INFO: Habit '%s' un-completed for %s", habit_id, day
                )
                self.emit(const.SIGNAL_SUFFIX_COMPLETIONS_CHANGED, habit_id=habit_id)
                return {"completed": False, "completion": None, "gamification": None}

            completion = self.storage.add_completion(habit_id, day)
            await self.storage.async_save()

        const.LOGGER.info("INFO: Habit '%s' completed for %s", habit_id, day)
        self.emit(const.SIGNAL_SUFFIX_COMPLETIONS_CHANGED, habit_id=habit_id)
        return {
            "completed": True,
            "completion": completion,
            "gamification": await self._async_run_gamification(habit_id, day),
        }

    async def async_set_completion_notes(
        self, habit_id: str, day: date, notes: str | None
    ) -> dict[str, Any]:
        """Set notes on a completion, creating the completion if needed.

        Returns:
            {completion, gamification}; gamification is set only when a new
            completion was created

        Raises:
            HomeAssistantError: If the habit does not exist
        """
        self._require_habit(habit_id)

        async with self._lock:
            completion = self.storage.update_completion_notes(habit_id, day, notes)
            created = completion is None
            if created:
                completion = self.storage.add_completion(habit_id, day, notes)
            await self.storage.async_save()

        self.emit(const.SIGNAL_SUFFIX_COMPLETIONS_CHANGED, habit_id=habit_id)
        gamification = None
        if created:
            const.LOGGER.info(
                "INFO: Habit '%s' completed with notes for %s", habit_id, day
            )
            gamification = await self._async_run_gamification(habit_id, day)
        return {"completion": completion, "gamification": gamification}

    async def _async_run_gamification(
        self, habit_id: str, day: date
    ) -> GamificationEvents | None:
        """Run gamification without letting a failure undo the completion."""
        try:
            return await self._gamification.async_process_completion(habit_id, day)
        except Exception:  # pylint: disable=broad-exception-caught
            const.LOGGER.exception(
                "Error processing gamification for habit %s on %s", habit_id, day
            )
            return None

    def _require_habit(self, habit_id: str) -> None:
        if self.storage.get_habit(habit_id) is None:
            raise HomeAssistantError(const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id))
