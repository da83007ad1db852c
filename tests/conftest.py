"""Shared fixtures for Habit Tracker tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habit_tracker import const

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.HABIT_TRACKER_TITLE,
        data={},
        options=dict(const.DEFAULT_OPTIONS),
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return mock storage data structure."""
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        const.DATA_HABITS: {},
        const.DATA_COMPLETIONS: {},
        const.DATA_USER_STATS: None,
        const.DATA_ACHIEVEMENTS: {},
    }


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the Habit Tracker integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


def create_mock_habit_data(
    habit_id: str = "habit_1",
    name: str = "Drink water",
    frequency: str = const.FREQUENCY_DAILY,
    frequency_days: list[int] | None = None,
    created_at: str = "2024-01-01",
    position: int = 0,
    archived: bool = False,
) -> dict[str, Any]:
    """Create mock habit data for testing."""
    return {
        const.DATA_HABIT_ID: habit_id,
        const.DATA_HABIT_NAME: name,
        const.DATA_HABIT_DESCRIPTION: None,
        const.DATA_HABIT_FREQUENCY: frequency,
        const.DATA_HABIT_FREQUENCY_DAYS: frequency_days,
        const.DATA_HABIT_COLOR: const.DEFAULT_HABIT_COLOR,
        const.DATA_HABIT_ICON: const.DEFAULT_HABIT_ICON,
        const.DATA_HABIT_POSITION: position,
        const.DATA_HABIT_ARCHIVED: archived,
        const.DATA_HABIT_CREATED_AT: created_at,
        const.DATA_HABIT_UPDATED_AT: created_at,
    }


def create_mock_completions(habit_id: str, dates: list[str]) -> list[dict[str, Any]]:
    """Create flat completion records for report engine tests."""
    return [
        {
            const.DATA_COMPLETION_HABIT_ID: habit_id,
            const.DATA_COMPLETION_DATE: day,
            const.DATA_COMPLETION_NOTES: None,
        }
        for day in dates
    ]
