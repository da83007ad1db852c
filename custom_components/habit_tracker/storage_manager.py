# File: storage_manager.py
"""Handles persistent data storage for the Habit Tracker integration.

Uses Home Assistant's Storage helper to save and load habit data, ensuring
the state is preserved across restarts. This includes habits, categories,
completions, the single user-stats row and unlocked achievements.

Storage layout:
    habits:       {habit_id: HabitData}
    categories:   {category_id: CategoryData}
    completions:  {habit_id: {YYYY-MM-DD: {notes, created_at}}}
    user_stats:   {total_xp, level, updated_at} (created lazily)
    achievements: {achievement_id: {unlocked_at, metadata}}

Keying completions by habit then date makes "at most one completion per
habit per day" structural. Keying achievements by id makes unlocks
at-most-once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const
from .utils.dt_utils import dt_format_iso_date, dt_now_iso

if TYPE_CHECKING:
    from datetime import date

    from homeassistant.core import HomeAssistant

    from .type_defs import CompletionRecord, UserStatsData


class HabitTrackerStorageManager:
    """Manages loading, saving, and accessing data from Home Assistant's storage.

    Utilizes the habit id as the primary key for habits and completions.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the storage manager.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations.

        user_stats is None until first read or write.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_CREATED_AT: dt_now_iso(),
            },
            const.DATA_HABITS: {},
            const.DATA_CATEGORIES: {},
            const.DATA_COMPLETIONS: {},
            const.DATA_USER_STATS: None,
            const.DATA_ACHIEVEMENTS: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Missing
        buckets in existing data are filled in from the default structure.
        """
        const.LOGGER.debug("DEBUG: HabitTrackerStorageManager: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            # No existing data, create a new default structure.
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = self.get_default_structure()
            return

        default = self.get_default_structure()
        self._data = {**default, **existing_data}
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s entities",
            {
                "habits": len(self._data.get(const.DATA_HABITS) or {}),
                "categories": len(self._data.get(const.DATA_CATEGORIES) or {}),
                "completions": self.count_completions(),
                "achievements": len(self._data.get(const.DATA_ACHIEVEMENTS) or {}),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )

    async def async_clear_data(self) -> None:
        """Clear all stored data and reset to default structure."""
        const.LOGGER.warning(
            "WARNING: Clearing all Habit Tracker data and resetting storage"
        )
        self._data = self.get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        await self.async_clear_data()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )

    # -------------------------------------------------------------------------------------
    # Habits
    # -------------------------------------------------------------------------------------

    def get_habits(self) -> dict[str, Any]:
        """Retrieve all habits keyed by id (archived included)."""
        return self._data.setdefault(const.DATA_HABITS, {})

    def get_habit(self, habit_id: str) -> dict[str, Any] | None:
        """Retrieve a habit by id."""
        return self.get_habits().get(habit_id)

    def get_active_habits(self) -> list[dict[str, Any]]:
        """Retrieve non-archived habits ordered by position."""
        return sorted(
            (
                habit
                for habit in self.get_habits().values()
                if not habit.get(const.DATA_HABIT_ARCHIVED, False)
            ),
            key=lambda habit: habit.get(const.DATA_HABIT_POSITION, 0),
        )

    def count_active_habits(self) -> int:
        """Return the number of non-archived habits."""
        return len(self.get_active_habits())

    def next_position(self) -> int:
        """Return the display position after the last active habit."""
        active = self.get_active_habits()
        if not active:
            return 0
        return active[-1].get(const.DATA_HABIT_POSITION, 0) + 1

    def upsert_habit(self, habit: dict[str, Any]) -> None:
        """Insert or replace a habit record."""
        self.get_habits()[habit[const.DATA_HABIT_ID]] = habit

    # -------------------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------------------

    def get_categories(self) -> list[dict[str, Any]]:
        """Retrieve all categories ordered by name."""
        return sorted(
            self._data.setdefault(const.DATA_CATEGORIES, {}).values(),
            key=lambda category: category[const.DATA_CATEGORY_NAME],
        )

    def get_category(self, category_id: str) -> dict[str, Any] | None:
        """Retrieve a category by id."""
        return self._data.setdefault(const.DATA_CATEGORIES, {}).get(category_id)

    def upsert_category(self, category: dict[str, Any]) -> None:
        """Insert or replace a category record."""
        self._data.setdefault(const.DATA_CATEGORIES, {})[
            category[const.DATA_CATEGORY_ID]
        ] = category

    def remove_category(self, category_id: str) -> list[dict[str, Any]]:
        """Remove a category and clear it from every habit that used it.

        Returns:
            The habits whose category_id was cleared (archived included)
        """
        self._data.setdefault(const.DATA_CATEGORIES, {}).pop(category_id, None)
        unassigned = [
            habit
            for habit in self.get_habits().values()
            if habit.get(const.DATA_HABIT_CATEGORY_ID) == category_id
        ]
        for habit in unassigned:
            habit[const.DATA_HABIT_CATEGORY_ID] = None
        return unassigned

    # -------------------------------------------------------------------------------------
    # Completions
    # -------------------------------------------------------------------------------------

    def _get_completion_bucket(self) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(const.DATA_COMPLETIONS, {})

    def get_completion(self, habit_id: str, day: date) -> CompletionRecord | None:
        """Retrieve the completion for a habit on a date, if any."""
        key = dt_format_iso_date(day)
        entry = self._get_completion_bucket().get(habit_id, {}).get(key)
        if entry is None:
            return None
        return self._make_completion_record(habit_id, key, entry)

    def add_completion(
        self, habit_id: str, day: date, notes: str | None = None
    ) -> CompletionRecord | None:
        """Insert a completion unless one already exists.

        Returns:
            The new record, or None when the habit was already completed that day
        """
        key = dt_format_iso_date(day)
        habit_bucket = self._get_completion_bucket().setdefault(habit_id, {})
        if key in habit_bucket:
            return None

        entry = {
            const.DATA_COMPLETION_NOTES: notes or None,
            const.DATA_COMPLETION_CREATED_AT: dt_now_iso(),
        }
        habit_bucket[key] = entry
        return self._make_completion_record(habit_id, key, entry)

    def remove_completion(self, habit_id: str, day: date) -> bool:
        """Delete the completion for a habit on a date.

        Returns:
            True if a completion was removed
        """
        habit_bucket = self._get_completion_bucket().get(habit_id)
        if not habit_bucket:
            return False
        return habit_bucket.pop(dt_format_iso_date(day), None) is not None

    def update_completion_notes(
        self, habit_id: str, day: date, notes: str | None
    ) -> CompletionRecord | None:
        """Replace the notes on an existing completion.

        Returns:
            The updated record, or None when no completion exists
        """
        key = dt_format_iso_date(day)
        entry = self._get_completion_bucket().get(habit_id, {}).get(key)
        if entry is None:
            return None
        entry[const.DATA_COMPLETION_NOTES] = notes or None
        return self._make_completion_record(habit_id, key, entry)

    def get_completion_dates(self, habit_id: str) -> list[str]:
        """Return a habit's completion dates, ascending."""
        return sorted(self._get_completion_bucket().get(habit_id, {}))

    def get_completion_records(
        self, habit_ids: set[str] | None = None
    ) -> list[CompletionRecord]:
        """Return flat completion records, optionally limited to some habits."""
        records: list[CompletionRecord] = []
        for habit_id, habit_bucket in self._get_completion_bucket().items():
            if habit_ids is not None and habit_id not in habit_ids:
                continue
            records.extend(
                self._make_completion_record(habit_id, key, entry)
                for key, entry in sorted(habit_bucket.items())
            )
        return records

    def count_completions(self) -> int:
        """Return the total number of completions across all habits."""
        return sum(
            len(habit_bucket)
            for habit_bucket in (self._data.get(const.DATA_COMPLETIONS) or {}).values()
        )

    def count_habits_completed_on(self, day: date) -> int:
        """Return the number of distinct habits completed on a date."""
        key = dt_format_iso_date(day)
        return sum(
            1
            for habit_bucket in self._get_completion_bucket().values()
            if key in habit_bucket
        )

    @staticmethod
    def _make_completion_record(
        habit_id: str, key: str, entry: dict[str, Any]
    ) -> CompletionRecord:
        return {
            "habit_id": habit_id,
            "completed_date": key,
            "notes": entry.get(const.DATA_COMPLETION_NOTES),
            "created_at": entry.get(const.DATA_COMPLETION_CREATED_AT),
        }

    # -------------------------------------------------------------------------------------
    # User Stats
    # -------------------------------------------------------------------------------------

    def get_or_create_user_stats(self) -> UserStatsData:
        """Return the single user-stats row, creating it on first access."""
        stats = self._data.get(const.DATA_USER_STATS)
        if stats is None:
            const.LOGGER.debug("DEBUG: Creating initial user stats row")
            stats = {
                const.DATA_USER_STATS_TOTAL_XP: 0,
                const.DATA_USER_STATS_LEVEL: const.DEFAULT_LEVEL,
                const.DATA_USER_STATS_UPDATED_AT: dt_now_iso(),
            }
            self._data[const.DATA_USER_STATS] = stats
        return stats

    def set_user_stats(self, total_xp: int, level: int) -> UserStatsData:
        """Overwrite XP and level on the user-stats row."""
        stats = self.get_or_create_user_stats()
        stats[const.DATA_USER_STATS_TOTAL_XP] = total_xp
        stats[const.DATA_USER_STATS_LEVEL] = level
        stats[const.DATA_USER_STATS_UPDATED_AT] = dt_now_iso()
        return stats

    # -------------------------------------------------------------------------------------
    # Achievements
    # -------------------------------------------------------------------------------------

    def get_unlocked_achievements(self) -> dict[str, Any]:
        """Retrieve unlocked achievements keyed by achievement id."""
        return self._data.setdefault(const.DATA_ACHIEVEMENTS, {})

    def get_unlocked_achievement_ids(self) -> set[str]:
        """Return the set of unlocked achievement ids."""
        return set(self.get_unlocked_achievements())

    def insert_achievement(
        self, achievement_id: str, metadata: dict[str, Any] | None = None
    ) -> bool:
        """Record an unlock at most once.

        Returns:
            True if inserted, False if the achievement was already unlocked
            (the existing row and its timestamp are left untouched)
        """
        unlocked = self.get_unlocked_achievements()
        if achievement_id in unlocked:
            return False
        unlocked[achievement_id] = {
            const.DATA_ACHIEVEMENT_UNLOCKED_AT: dt_now_iso(),
            const.DATA_ACHIEVEMENT_METADATA: metadata or {},
        }
        return True
