"""Tests for CompletionManager - toggles, notes and gamification side effects."""

# pylint: disable=redefined-outer-name

from datetime import date
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_capture_events,
)

from custom_components.habit_tracker import const
from custom_components.habit_tracker.managers import CompletionManager
from custom_components.habit_tracker.utils.dt_utils import dt_today_local

from .conftest import create_mock_habit_data


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Storage with three daily habits and 195 XP banked."""
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        const.DATA_HABITS: {
            habit_id: create_mock_habit_data(habit_id, name=name, position=position)
            for position, (habit_id, name) in enumerate(
                [("water", "Drink water"), ("read", "Read"), ("walk", "Walk")]
            )
        },
        const.DATA_COMPLETIONS: {},
        const.DATA_USER_STATS: {
            const.DATA_USER_STATS_TOTAL_XP: 195,
            const.DATA_USER_STATS_LEVEL: 1,
            const.DATA_USER_STATS_UPDATED_AT: "2024-01-01T00:00:00+00:00",
        },
        const.DATA_ACHIEVEMENTS: {},
    }


@pytest.fixture
def completion_manager(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> CompletionManager:
    """Return the completion manager of the set-up entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][
        const.COMPLETION_MANAGER
    ]


def _unlocked_ids(result: dict[str, Any]) -> list[str]:
    return [a["id"] for a in result["gamification"]["achievements_unlocked"]]


class TestToggleCompletion:
    """Toggling a habit on a date."""

    async def test_complete_today_awards_xp_and_levels_up(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """A one-day streak earns 12 XP, crossing the level 2 threshold."""
        level_events = async_capture_events(hass, const.EVENT_LEVEL_UP)

        result = await completion_manager.async_toggle_completion(
            "water", dt_today_local()
        )
        await hass.async_block_till_done()

        assert result["completed"] is True
        assert result["completion"]["habit_id"] == "water"
        gamification = result["gamification"]
        assert gamification["xp_gained"] == 12
        assert gamification["new_total_xp"] == 207
        assert gamification["previous_level"] == 1
        assert gamification["new_level"] == 2
        assert gamification["leveled_up"] is True
        assert const.ACHIEVEMENT_FIRST_STEP in _unlocked_ids(result)

        assert len(level_events) == 1
        assert level_events[0].data["new_level"] == 2

    async def test_untoggle_keeps_xp(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """Removing a completion never takes XP back."""
        today = dt_today_local()
        await completion_manager.async_toggle_completion("water", today)

        result = await completion_manager.async_toggle_completion("water", today)

        assert result == {"completed": False, "completion": None, "gamification": None}
        assert completion_manager.storage.get_completion("water", today) is None
        stats = completion_manager.storage.get_or_create_user_stats()
        assert stats[const.DATA_USER_STATS_TOTAL_XP] == 207

    async def test_past_date_uses_current_streak(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """Back-filling an old day earns base XP when nothing is current."""
        result = await completion_manager.async_toggle_completion(
            "water", date(2024, 1, 2)
        )

        assert result["completion"]["completed_date"] == "2024-01-02"
        assert result["gamification"]["xp_gained"] == 10

    async def test_three_habits_in_one_day_unlock_diversified(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """The third distinct habit on the same day unlocks diversified."""
        today = dt_today_local()
        await completion_manager.async_toggle_completion("water", today)
        second = await completion_manager.async_toggle_completion("read", today)
        third = await completion_manager.async_toggle_completion("walk", today)

        assert const.ACHIEVEMENT_DIVERSIFIED not in _unlocked_ids(second)
        assert const.ACHIEVEMENT_DIVERSIFIED in _unlocked_ids(third)

    async def test_gamification_failure_keeps_completion(
        self,
        hass: HomeAssistant,
        completion_manager: CompletionManager,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A gamification error is logged; the completion stands."""
        gamification = hass.data[const.DOMAIN]["test_entry_id"][
            const.GAMIFICATION_MANAGER
        ]
        today = dt_today_local()
        with patch.object(
            gamification,
            "async_process_completion",
            side_effect=RuntimeError("boom"),
        ):
            result = await completion_manager.async_toggle_completion("water", today)

        assert result["completed"] is True
        assert result["gamification"] is None
        assert completion_manager.storage.get_completion("water", today) is not None
        assert "Error processing gamification" in caplog.text

    async def test_unknown_habit(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """Completing a missing habit is an error and writes nothing."""
        with pytest.raises(HomeAssistantError):
            await completion_manager.async_toggle_completion(
                "missing", dt_today_local()
            )
        assert completion_manager.storage.count_completions() == 0


class TestCompletionNotes:
    """Notes on completions."""

    async def test_notes_create_completion(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """Notes on an uncompleted day create the completion and award XP."""
        today = dt_today_local()
        result = await completion_manager.async_set_completion_notes(
            "read", today, "Two chapters"
        )

        assert result["completion"]["notes"] == "Two chapters"
        assert result["gamification"]["xp_gained"] == 12

    async def test_notes_update_existing(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """Updating notes does not award XP again."""
        today = dt_today_local()
        await completion_manager.async_toggle_completion("read", today)

        result = await completion_manager.async_set_completion_notes(
            "read", today, "Short session"
        )

        assert result["completion"]["notes"] == "Short session"
        assert result["gamification"] is None
        stats = completion_manager.storage.get_or_create_user_stats()
        assert stats[const.DATA_USER_STATS_TOTAL_XP] == 207

    async def test_empty_notes_clear(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """An empty string clears the notes."""
        today = dt_today_local()
        await completion_manager.async_set_completion_notes("read", today, "x")

        result = await completion_manager.async_set_completion_notes("read", today, "")

        assert result["completion"]["notes"] is None

    async def test_unknown_habit(
        self, hass: HomeAssistant, completion_manager: CompletionManager
    ) -> None:
        """Notes on a missing habit are an error."""
        with pytest.raises(HomeAssistantError):
            await completion_manager.async_set_completion_notes(
                "missing", dt_today_local(), "x"
            )
