# File: options_flow.py
"""Options Flow for the Habit Tracker integration.

Edits the report window sizes used by the analytics service. Saving the
options reloads the entry through its update listener.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector

from . import const


def build_options_schema(current: dict[str, Any]) -> vol.Schema:
    """Build the options form with each field bounded by OPTION_RANGES."""
    fields = {}
    for key, (minimum, maximum) in const.OPTION_RANGES.items():
        default = current.get(key, const.DEFAULT_OPTIONS[key])
        fields[vol.Required(key, default=default)] = vol.All(
            selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=minimum,
                    max=maximum,
                    step=1,
                )
            ),
            vol.Coerce(int),
            vol.Range(min=minimum, max=maximum),
        )
    return vol.Schema(fields)


class HabitTrackerOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for report window sizes."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict[str, Any] = {}

    async def async_step_init(self, user_input: Optional[dict[str, Any]] = None):
        """Show and save the report window options."""
        self._entry_options = {**const.DEFAULT_OPTIONS, **self.config_entry.options}

        if user_input is not None:
            self._entry_options.update(user_input)
            const.LOGGER.debug("DEBUG: Saving options: %s", self._entry_options)
            return self.async_create_entry(title="", data=self._entry_options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=build_options_schema(self._entry_options),
        )
