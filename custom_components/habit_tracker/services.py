# File: services.py
"""Defines custom services for the Habit Tracker integration.

Write services (create/update/archive habits, manage categories, toggle
completions) can be called from scripts or automations and optionally return
their result. Read services (stats, analytics, categories, gamification
status) only return data.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .utils.dt_utils import dt_today_local

# --- Service Schemas ---
_NAME_VALIDATOR = vol.All(
    cv.string, vol.Strip, vol.Length(min=1, max=const.HABIT_NAME_MAX_LENGTH)
)
_DESCRIPTION_VALIDATOR = vol.All(
    cv.string, vol.Length(max=const.HABIT_DESCRIPTION_MAX_LENGTH)
)
_FREQUENCY_DAYS_VALIDATOR = vol.All(
    cv.ensure_list,
    [
        vol.All(
            vol.Coerce(int),
            vol.Range(min=const.WEEKDAY_INDEX_MIN, max=const.WEEKDAY_INDEX_MAX),
        )
    ],
)

CREATE_HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): _NAME_VALIDATOR,
        vol.Optional(const.FIELD_DESCRIPTION): _DESCRIPTION_VALIDATOR,
        vol.Optional(const.FIELD_FREQUENCY, default=const.FREQUENCY_DAILY): vol.In(
            const.FREQUENCY_OPTIONS
        ),
        vol.Optional(const.FIELD_FREQUENCY_DAYS): _FREQUENCY_DAYS_VALIDATOR,
        vol.Optional(const.FIELD_COLOR): cv.string,
        vol.Optional(const.FIELD_ICON): cv.string,
        vol.Optional(const.FIELD_CATEGORY_ID): vol.Any(None, cv.string),
    }
)

UPDATE_HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
        vol.Optional(const.FIELD_NAME): _NAME_VALIDATOR,
        vol.Optional(const.FIELD_DESCRIPTION): _DESCRIPTION_VALIDATOR,
        vol.Optional(const.FIELD_FREQUENCY): vol.In(const.FREQUENCY_OPTIONS),
        vol.Optional(const.FIELD_FREQUENCY_DAYS): _FREQUENCY_DAYS_VALIDATOR,
        vol.Optional(const.FIELD_COLOR): cv.string,
        vol.Optional(const.FIELD_ICON): cv.string,
        vol.Optional(const.FIELD_CATEGORY_ID): vol.Any(None, cv.string),
    }
)

HABIT_ID_SCHEMA = vol.Schema({vol.Required(const.FIELD_HABIT_ID): cv.string})

_CATEGORY_NAME_VALIDATOR = vol.All(
    cv.string, vol.Strip, vol.Length(min=1, max=const.CATEGORY_NAME_MAX_LENGTH)
)

CREATE_CATEGORY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): _CATEGORY_NAME_VALIDATOR,
        vol.Optional(const.FIELD_COLOR): vol.Any(None, cv.string),
    }
)

UPDATE_CATEGORY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CATEGORY_ID): cv.string,
        vol.Optional(const.FIELD_NAME): _CATEGORY_NAME_VALIDATOR,
        vol.Optional(const.FIELD_COLOR): vol.Any(None, cv.string),
    }
)

CATEGORY_ID_SCHEMA = vol.Schema({vol.Required(const.FIELD_CATEGORY_ID): cv.string})

REORDER_HABITS_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_HABIT_IDS): vol.All(cv.ensure_list, [cv.string])}
)

COMPLETION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
        vol.Optional(const.FIELD_DATE): cv.date,
    }
)

COMPLETION_NOTES_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
        vol.Optional(const.FIELD_DATE): cv.date,
        vol.Optional(const.FIELD_NOTES): vol.Any(None, cv.string),
    }
)

HABIT_STATS_SCHEMA = COMPLETION_SCHEMA

DATE_SCHEMA = vol.Schema({vol.Optional(const.FIELD_DATE): cv.date})

EMPTY_SCHEMA = vol.Schema({})

# Service field name -> stored habit field
_HABIT_FIELD_MAP = {
    const.FIELD_NAME: const.DATA_HABIT_NAME,
    const.FIELD_DESCRIPTION: const.DATA_HABIT_DESCRIPTION,
    const.FIELD_FREQUENCY: const.DATA_HABIT_FREQUENCY,
    const.FIELD_FREQUENCY_DAYS: const.DATA_HABIT_FREQUENCY_DAYS,
    const.FIELD_COLOR: const.DATA_HABIT_COLOR,
    const.FIELD_ICON: const.DATA_HABIT_ICON,
    const.FIELD_CATEGORY_ID: const.DATA_HABIT_CATEGORY_ID,
}


def get_first_habit_tracker_entry(hass: HomeAssistant) -> Optional[str]:
    """Retrieve the first Habit Tracker config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def _habit_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        stored: data[field] for field, stored in _HABIT_FIELD_MAP.items() if field in data
    }


# --- Setup Services ---
def async_setup_services(hass: HomeAssistant):
    """Register Habit Tracker services."""

    def _get_entry_data(service_label: str) -> dict[str, Any]:
        entry_id = get_first_habit_tracker_entry(hass)
        if not entry_id:
            const.LOGGER.warning(
                "WARNING: %s: %s", service_label, const.MSG_NO_ENTRY_FOUND
            )
            raise HomeAssistantError(const.MSG_NO_ENTRY_FOUND)
        return hass.data[const.DOMAIN][entry_id]

    async def handle_create_habit(call: ServiceCall) -> ServiceResponse:
        """Handle creating a habit."""
        entry_data = _get_entry_data("Create Habit")
        return await entry_data[const.HABIT_MANAGER].async_create_habit(
            _habit_fields(call.data)
        )

    async def handle_update_habit(call: ServiceCall) -> ServiceResponse:
        """Handle editing a habit's fields."""
        entry_data = _get_entry_data("Update Habit")
        habit = await entry_data[const.HABIT_MANAGER].async_update_habit(
            call.data[const.FIELD_HABIT_ID], _habit_fields(call.data)
        )
        return {"habit": habit}

    async def handle_archive_habit(call: ServiceCall) -> ServiceResponse:
        """Handle archiving a habit."""
        entry_data = _get_entry_data("Archive Habit")
        habit = await entry_data[const.HABIT_MANAGER].async_archive_habit(
            call.data[const.FIELD_HABIT_ID]
        )
        const.LOGGER.info("INFO: Habit '%s' archived", habit[const.DATA_HABIT_NAME])
        return {"habit": habit}

    async def handle_unarchive_habit(call: ServiceCall) -> ServiceResponse:
        """Handle restoring an archived habit."""
        entry_data = _get_entry_data("Unarchive Habit")
        habit = await entry_data[const.HABIT_MANAGER].async_unarchive_habit(
            call.data[const.FIELD_HABIT_ID]
        )
        const.LOGGER.info("INFO: Habit '%s' unarchived", habit[const.DATA_HABIT_NAME])
        return {"habit": habit}

    async def handle_reorder_habits(call: ServiceCall) -> None:
        """Handle setting the display order of habits."""
        entry_data = _get_entry_data("Reorder Habits")
        await entry_data[const.HABIT_MANAGER].async_reorder_habits(
            call.data[const.FIELD_HABIT_IDS]
        )

    async def handle_create_category(call: ServiceCall) -> ServiceResponse:
        """Handle creating a category."""
        entry_data = _get_entry_data("Create Category")
        category = await entry_data[const.CATEGORY_MANAGER].async_create_category(
            call.data[const.FIELD_NAME], call.data.get(const.FIELD_COLOR)
        )
        return {"category": category}

    async def handle_update_category(call: ServiceCall) -> ServiceResponse:
        """Handle renaming or recoloring a category."""
        entry_data = _get_entry_data("Update Category")
        changes = {
            stored: call.data[field]
            for field, stored in (
                (const.FIELD_NAME, const.DATA_CATEGORY_NAME),
                (const.FIELD_COLOR, const.DATA_CATEGORY_COLOR),
            )
            if field in call.data
        }
        category = await entry_data[const.CATEGORY_MANAGER].async_update_category(
            call.data[const.FIELD_CATEGORY_ID], changes
        )
        return {"category": category}

    async def handle_delete_category(call: ServiceCall) -> ServiceResponse:
        """Handle deleting a category; its habits become uncategorized."""
        entry_data = _get_entry_data("Delete Category")
        habit_ids = await entry_data[const.CATEGORY_MANAGER].async_delete_category(
            call.data[const.FIELD_CATEGORY_ID]
        )
        return {"uncategorized_habit_ids": habit_ids}

    async def handle_get_categories(_call: ServiceCall) -> ServiceResponse:
        """Return every category ordered by name."""
        entry_data = _get_entry_data("Get Categories")
        return {"categories": entry_data[const.CATEGORY_MANAGER].get_categories()}

    async def handle_toggle_completion(call: ServiceCall) -> ServiceResponse:
        """Handle completing or un-completing a habit on a date."""
        entry_data = _get_entry_data("Toggle Completion")
        return await entry_data[const.COMPLETION_MANAGER].async_toggle_completion(
            call.data[const.FIELD_HABIT_ID],
            call.data.get(const.FIELD_DATE) or dt_today_local(),
        )

    async def handle_set_completion_notes(call: ServiceCall) -> ServiceResponse:
        """Handle setting notes on a completion."""
        entry_data = _get_entry_data("Set Completion Notes")
        return await entry_data[const.COMPLETION_MANAGER].async_set_completion_notes(
            call.data[const.FIELD_HABIT_ID],
            call.data.get(const.FIELD_DATE) or dt_today_local(),
            call.data.get(const.FIELD_NOTES) or None,
        )

    async def handle_get_habit_stats(call: ServiceCall) -> ServiceResponse:
        """Return streaks and completion rates for one habit."""
        entry_data = _get_entry_data("Get Habit Stats")
        habit = entry_data[const.HABIT_MANAGER].get_habit_or_raise(
            call.data[const.FIELD_HABIT_ID]
        )
        return entry_data[const.STATISTICS_MANAGER].get_habit_stats(
            habit, call.data.get(const.FIELD_DATE)
        )

    async def handle_get_habits_for_date(call: ServiceCall) -> ServiceResponse:
        """Return the habits due on a date with their completion."""
        entry_data = _get_entry_data("Get Habits For Date")
        day = call.data.get(const.FIELD_DATE) or dt_today_local()
        return {
            "date": day.isoformat(),
            "habits": entry_data[const.STATISTICS_MANAGER].get_habits_for_date(day),
        }

    async def handle_get_analytics(call: ServiceCall) -> ServiceResponse:
        """Return every dashboard report."""
        entry_data = _get_entry_data("Get Analytics")
        return entry_data[const.STATISTICS_MANAGER].get_analytics(
            call.data.get(const.FIELD_DATE)
        )

    async def handle_get_gamification_status(_call: ServiceCall) -> ServiceResponse:
        """Return XP, level progress and achievement counts."""
        entry_data = _get_entry_data("Get Gamification Status")
        return entry_data[const.GAMIFICATION_MANAGER].get_status()

    async def handle_get_achievements(_call: ServiceCall) -> ServiceResponse:
        """Return the achievement catalog with unlock state."""
        entry_data = _get_entry_data("Get Achievements")
        return {
            "achievements": entry_data[const.GAMIFICATION_MANAGER].get_achievements()
        }

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CREATE_HABIT,
        handle_create_habit,
        schema=CREATE_HABIT_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_HABIT,
        handle_update_habit,
        schema=UPDATE_HABIT_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ARCHIVE_HABIT,
        handle_archive_habit,
        schema=HABIT_ID_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UNARCHIVE_HABIT,
        handle_unarchive_habit,
        schema=HABIT_ID_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REORDER_HABITS,
        handle_reorder_habits,
        schema=REORDER_HABITS_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CREATE_CATEGORY,
        handle_create_category,
        schema=CREATE_CATEGORY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_CATEGORY,
        handle_update_category,
        schema=UPDATE_CATEGORY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_CATEGORY,
        handle_delete_category,
        schema=CATEGORY_ID_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_CATEGORIES,
        handle_get_categories,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_TOGGLE_COMPLETION,
        handle_toggle_completion,
        schema=COMPLETION_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_COMPLETION_NOTES,
        handle_set_completion_notes,
        schema=COMPLETION_NOTES_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_HABIT_STATS,
        handle_get_habit_stats,
        schema=HABIT_STATS_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_HABITS_FOR_DATE,
        handle_get_habits_for_date,
        schema=DATE_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_ANALYTICS,
        handle_get_analytics,
        schema=DATE_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_GAMIFICATION_STATUS,
        handle_get_gamification_status,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_ACHIEVEMENTS,
        handle_get_achievements,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.info("INFO: Habit Tracker services have been registered successfully")


async def async_unload_services(hass: HomeAssistant):
    """Unregister Habit Tracker services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Habit Tracker services have been unregistered")
