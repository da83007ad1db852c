"""Tests for the Habit Tracker config and options flows."""

from unittest.mock import patch

import pytest
import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habit_tracker import const


async def test_form_user_flow_success(hass: HomeAssistant) -> None:
    """Test the single confirmation step creates an entry with default options."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == const.CONFIG_FLOW_STEP_USER

    with patch(
        "custom_components.habit_tracker.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"), user_input={}
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == const.HABIT_TRACKER_TITLE
    assert result.get("data") == {}
    assert result.get("options") == const.DEFAULT_OPTIONS
    assert len(mock_setup_entry.mock_calls) == 1


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """Test a second entry is refused."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == const.ABORT_SINGLE_INSTANCE_ALLOWED


async def test_options_flow_updates_windows(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test the options form shows current values and saves new ones."""
    result = await hass.config_entries.options.async_init(init_integration.entry_id)
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == const.OPTIONS_FLOW_STEP_INIT

    result = await hass.config_entries.options.async_configure(
        result.get("flow_id"),
        user_input={
            const.CONF_SUMMARY_WEEKS: 4,
            const.CONF_SUMMARY_MONTHS: 3,
            const.CONF_TREND_WEEKS: 26,
            const.CONF_PATTERN_DAYS: 30,
            const.CONF_COMPARISON_TOP_N: 5,
        },
    )
    await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert init_integration.options[const.CONF_SUMMARY_WEEKS] == 4
    assert init_integration.options[const.CONF_COMPARISON_TOP_N] == 5

    statistics = hass.data[const.DOMAIN][init_integration.entry_id][
        const.STATISTICS_MANAGER
    ]
    assert statistics.options[const.CONF_TREND_WEEKS] == 26


async def test_options_flow_rejects_out_of_range(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test values outside the allowed range fail validation."""
    result = await hass.config_entries.options.async_init(init_integration.entry_id)

    with pytest.raises(vol.Invalid):
        await hass.config_entries.options.async_configure(
            result.get("flow_id"),
            user_input={
                const.CONF_SUMMARY_WEEKS: 0,
                const.CONF_SUMMARY_MONTHS: 3,
                const.CONF_TREND_WEEKS: 26,
                const.CONF_PATTERN_DAYS: 30,
                const.CONF_COMPARISON_TOP_N: 5,
            },
        )
