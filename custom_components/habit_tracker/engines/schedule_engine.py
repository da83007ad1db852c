"""Schedule Engine for Habit Tracker.

Answers "is this habit due on this date?" for a habit's recurrence rule,
using `dateutil.rrule` for weekday-filtered day enumeration.

Recurrence rules:
    - daily:  every date
    - custom: dates whose weekday index (0=Sunday) is in frequency_days
    - weekly: every date for daily-style consumers; week-as-unit semantics
              live in the statistics and report engines

Every range is clipped to the habit's local creation date.

IMPORTANT: This module must NOT import from managers or storage.
Only import from const.py, type_defs.py, utils and standard libraries.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, ClassVar

from dateutil.rrule import DAILY, FR, MO, SA, SU, TH, TU, WE, rrule

from .. import const
from ..utils.dt_utils import MIDDAY, dt_created_date, dt_weekday_index

if TYPE_CHECKING:
    from collections.abc import Mapping


class ApplicabilityResolver:
    """Resolve the dates on which a habit is applicable.

    Example:
        resolver = ApplicabilityResolver(habit)
        days = resolver.applicable_dates(date(2026, 1, 1), date(2026, 1, 31))
        if resolver.is_applicable(date(2026, 1, 20)):
            ...

    Raises:
        ValueError: At construction, when the frequency tag is unknown
    """

    # Weekday index (0=Sunday) -> rrule weekday
    WEEKDAY_INDEX_TO_RRULE: ClassVar[list[Any]] = [SU, MO, TU, WE, TH, FR, SA]

    def __init__(self, habit: Mapping[str, Any]) -> None:
        """Initialize from a habit record.

        Args:
            habit: Habit dict with frequency, frequency_days and created_at
        """
        frequency = habit.get(const.DATA_HABIT_FREQUENCY)
        if frequency not in const.FREQUENCY_OPTIONS:
            raise ValueError(const.ERROR_UNKNOWN_FREQUENCY_FMT.format(frequency))

        self._frequency: str = frequency
        self._created_date: date | None = dt_created_date(
            habit.get(const.DATA_HABIT_CREATED_AT)
        )
        self._frequency_days: frozenset[int] = frozenset(
            day
            for day in habit.get(const.DATA_HABIT_FREQUENCY_DAYS) or []
            if const.WEEKDAY_INDEX_MIN <= day <= const.WEEKDAY_INDEX_MAX
        )

    @property
    def frequency(self) -> str:
        """Return the habit's frequency tag."""
        return self._frequency

    @property
    def created_date(self) -> date | None:
        """Return the habit's local creation date, if known."""
        return self._created_date

    @property
    def is_weekly(self) -> bool:
        """Return True when the habit counts in whole weeks."""
        return self._frequency == const.FREQUENCY_WEEKLY

    def clip_start(self, start: date) -> date:
        """Move a range start forward to the creation date if needed."""
        if self._created_date is not None and self._created_date > start:
            return self._created_date
        return start

    def is_scheduled(self, day: date) -> bool:
        """Return True if the recurrence rule includes the date.

        Ignores the creation date, so past days can still be back-filled.
        Weekly habits are scheduled every day; the user picks which day counts.
        """
        if self._frequency == const.FREQUENCY_CUSTOM:
            return dt_weekday_index(day) in self._frequency_days
        return True

    def is_applicable(self, day: date) -> bool:
        """Return True if the habit is due on the given date."""
        if self._created_date is not None and day < self._created_date:
            return False
        return self.is_scheduled(day)

    def applicable_dates(self, start: date, end: date) -> list[date]:
        """Return applicable dates in [start, end], chronological, no duplicates.

        Returns an empty list when the clipped range is empty, or when a
        custom habit has no scheduled weekdays.
        """
        start = self.clip_start(start)
        if start > end:
            return []

        byweekday = None
        if self._frequency == const.FREQUENCY_CUSTOM:
            if not self._frequency_days:
                return []
            byweekday = [
                self.WEEKDAY_INDEX_TO_RRULE[day] for day in sorted(self._frequency_days)
            ]

        # Type stubs expect Literal weekdays, but rrule accepts weekday objects
        rule = rrule(
            DAILY,
            dtstart=datetime.combine(start, MIDDAY),
            until=datetime.combine(end, MIDDAY),
            byweekday=byweekday,  # type: ignore[arg-type]
        )
        return [occurrence.date() for occurrence in rule]
