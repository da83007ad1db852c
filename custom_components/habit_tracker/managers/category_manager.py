"""Category Manager - Create, rename and delete habit categories.

Deleting a category never deletes habits: every habit filed under it
(archived ones included) is left without a category.
"""

from __future__ import annotations

from typing import Any
import uuid

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager


class CategoryManager(BaseManager):
    """Manager for habit categories."""

    async def async_setup(self) -> None:
        """Set up the manager."""
        const.LOGGER.debug(
            "DEBUG: CategoryManager ready with %s categories",
            len(self.storage.get_categories()),
        )

    def get_categories(self) -> list[dict[str, Any]]:
        """Return every category ordered by name."""
        return self.storage.get_categories()

    def get_category_or_raise(self, category_id: str) -> dict[str, Any]:
        """Return a category or raise HomeAssistantError."""
        category = self.storage.get_category(category_id)
        if category is None:
            raise HomeAssistantError(
                const.ERROR_CATEGORY_NOT_FOUND_FMT.format(category_id)
            )
        return category

    async def async_create_category(
        self, name: str, color: str | None = None
    ) -> dict[str, Any]:
        """Create a category."""
        category = {
            const.DATA_CATEGORY_ID: str(uuid.uuid4()),
            const.DATA_CATEGORY_NAME: name,
            const.DATA_CATEGORY_COLOR: color or None,
            const.DATA_CATEGORY_CREATED_AT: dt_now_iso(),
        }
        self.storage.upsert_category(category)
        await self.async_commit(
            const.SIGNAL_SUFFIX_CATEGORIES_CHANGED,
            category_id=category[const.DATA_CATEGORY_ID],
        )
        const.LOGGER.info(
            "INFO: Category '%s' created (%s)",
            name,
            category[const.DATA_CATEGORY_ID],
        )
        return category

    async def async_update_category(
        self, category_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Rename or recolor a category; absent fields are left untouched."""
        category = self.get_category_or_raise(category_id)
        if const.DATA_CATEGORY_NAME in changes:
            category[const.DATA_CATEGORY_NAME] = changes[const.DATA_CATEGORY_NAME]
        if const.DATA_CATEGORY_COLOR in changes:
            category[const.DATA_CATEGORY_COLOR] = (
                changes[const.DATA_CATEGORY_COLOR] or None
            )
        await self.async_commit(
            const.SIGNAL_SUFFIX_CATEGORIES_CHANGED, category_id=category_id
        )
        const.LOGGER.debug("DEBUG: Category '%s' updated", category_id)
        return category

    async def async_delete_category(self, category_id: str) -> list[str]:
        """Delete a category, leaving its habits uncategorized.

        Returns:
            Ids of the habits that lost the category

        Raises:
            HomeAssistantError: If the category is unknown
        """
        category = self.get_category_or_raise(category_id)
        now = dt_now_iso()
        unassigned = self.storage.remove_category(category_id)
        for habit in unassigned:
            habit[const.DATA_HABIT_UPDATED_AT] = now

        await self.async_commit(
            const.SIGNAL_SUFFIX_CATEGORIES_CHANGED, category_id=category_id
        )
        if unassigned:
            self.emit(const.SIGNAL_SUFFIX_HABITS_CHANGED, habit_id=None)
        const.LOGGER.info(
            "INFO: Category '%s' deleted, %s habits uncategorized",
            category[const.DATA_CATEGORY_NAME],
            len(unassigned),
        )
        return [habit[const.DATA_HABIT_ID] for habit in unassigned]
