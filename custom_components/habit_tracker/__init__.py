# File: __init__.py
"""Initialization file for the Habit Tracker integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and wiring the managers that own habit and
category writes, completion writes, gamification and statistics.

Key Features:
- Config entry setup and unload support.
- Storage management for persistent data handling.
- Options changes reload the entry so report windows take effect.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util

from . import const
from .managers import (
    CategoryManager,
    CompletionManager,
    GamificationManager,
    HabitManager,
    StatisticsManager,
)
from .services import async_setup_services, async_unload_services
from .storage_manager import HabitTrackerStorageManager
from .utils import dt_utils


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Habit Tracker entry: %s", entry.entry_id)

    # Set the home assistant configured timezone for date operations
    # Must be done before any manager reads "today"
    dt_utils.set_default_timezone(dt_util.get_time_zone(hass.config.time_zone))

    # Initialize the storage manager to handle persistent data.
    storage_manager = HabitTrackerStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_initialize()

    # Gamification is shared by the habit and completion managers.
    gamification_manager = GamificationManager(hass, entry, storage_manager)
    completion_manager = CompletionManager(
        hass, entry, storage_manager, gamification_manager
    )
    habit_manager = HabitManager(hass, entry, storage_manager, gamification_manager)
    category_manager = CategoryManager(hass, entry, storage_manager)
    statistics_manager = StatisticsManager(hass, entry, storage_manager)

    for manager in (
        gamification_manager,
        completion_manager,
        habit_manager,
        category_manager,
        statistics_manager,
    ):
        await manager.async_setup()

    # Store the managers and storage manager in hass.data.
    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.STORAGE_MANAGER: storage_manager,
        const.GAMIFICATION_MANAGER: gamification_manager,
        const.COMPLETION_MANAGER: completion_manager,
        const.HABIT_MANAGER: habit_manager,
        const.CATEGORY_MANAGER: category_manager,
        const.STATISTICS_MANAGER: statistics_manager,
    }

    # Set up services required by the integration.
    async_setup_services(hass)

    entry.async_on_unload(entry.add_update_listener(async_update_options))

    const.LOGGER.info("INFO: Habit Tracker setup complete for entry: %s", entry.entry_id)
    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when report options change."""
    const.LOGGER.debug("DEBUG: Options updated for entry %s, reloading", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Habit Tracker entry: %s", entry.entry_id)

    hass.data[const.DOMAIN].pop(entry.entry_id, None)
    if not hass.data[const.DOMAIN]:
        await async_unload_services(hass)

    return True


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Habit Tracker entry: %s", entry.entry_id)

    # The entry is already unloaded here, so open the store directly
    storage_manager = HabitTrackerStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_delete_storage()

    const.LOGGER.info("INFO: Habit Tracker entry data cleared: %s", entry.entry_id)
