# File: config_flow.py
"""Config flow for the Habit Tracker integration.

Habit data lives in storage rather than the config entry, so setup is a single
confirmation step. Only one instance is allowed.
"""

from typing import Any, Optional

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from .options_flow import HabitTrackerOptionsFlowHandler

# pylint: disable=abstract-method


class HabitTrackerConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Habit Tracker."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Confirm setup and create the entry with default report options."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.ABORT_SINGLE_INSTANCE_ALLOWED)

        if user_input is not None:
            const.LOGGER.info("INFO: Creating Habit Tracker config entry")
            return self.async_create_entry(
                title=const.HABIT_TRACKER_TITLE,
                data={},
                options=dict(const.DEFAULT_OPTIONS),
            )

        return self.async_show_form(step_id=const.CONFIG_FLOW_STEP_USER)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return HabitTrackerOptionsFlowHandler(config_entry)
