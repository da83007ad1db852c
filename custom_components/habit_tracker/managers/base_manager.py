"""Base manager class for Habit Tracker managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import async_dispatcher_send

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from ..storage_manager import HabitTrackerStorageManager


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Return the dispatcher signal for one entry, 'habit_tracker_{entry_id}_{suffix}'."""
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


class BaseManager(ABC):
    """Shared plumbing for the Habit Tracker managers.

    Managers announce writes through dispatcher signals scoped to their
    config entry (habits, categories or completions changed) and talk to
    automations through bus events (level up, achievement unlocked).

    Writes go through the shared storage manager; async_commit() saves and
    then announces the change.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        storage: HabitTrackerStorageManager,
    ) -> None:
        """Bind the manager to its entry and the shared storage manager."""
        self.hass = hass
        self.entry = entry
        self.entry_id = entry.entry_id
        self.storage = storage

    def emit(self, suffix: str, **payload: Any) -> None:
        """Send a change signal scoped to this entry.

        The payload travels as a single dict argument.
        """
        const.LOGGER.debug(
            "DEBUG: %s emitting '%s' (%s)",
            self.__class__.__name__,
            suffix,
            ", ".join(f"{key}={value}" for key, value in payload.items()),
        )
        async_dispatcher_send(
            self.hass, get_event_signal(self.entry_id, suffix), payload
        )

    async def async_commit(self, suffix: str, **payload: Any) -> None:
        """Persist storage, then emit the change signal."""
        await self.storage.async_save()
        self.emit(suffix, **payload)

    def fire_event(self, event_type: str, **event_data: Any) -> None:
        """Fire a Home Assistant bus event for automations."""
        const.LOGGER.debug("DEBUG: Firing bus event '%s': %s", event_type, event_data)
        self.hass.bus.async_fire(event_type, event_data)

    @abstractmethod
    async def async_setup(self) -> None:
        """Log the loaded state; called once at setup."""
