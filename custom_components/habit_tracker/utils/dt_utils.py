# File: utils/dt_utils.py
"""Date and time utilities for Habit Tracker.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Calendar conventions used across the integration:
    - Calendar dates are ISO strings (YYYY-MM-DD) at day granularity
    - Weeks start on Monday and end on Sunday
    - Weekday indices are 0=Sunday .. 6=Saturday
    - Interval math is done at local midday to avoid DST edge effects

Functions:
    - set_default_timezone / get_default_timezone: Configure local timezone
    - dt_today_local: Get today's date in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - dt_parse_iso_date: Strict YYYY-MM-DD parse (fails fast)
    - dt_format_iso_date: Format a date as YYYY-MM-DD
    - dt_at_midday: Anchor a date at 12:00 local time
    - dt_created_date: Day-granularity local date of a creation timestamp
    - dt_start_of_week / dt_end_of_week: Monday-start week bounds
    - dt_week_key: Key unique per Monday-start week
    - dt_weekday_index: Weekday index (0=Sunday)
    - dt_each_day / dt_each_week_start: Inclusive date enumeration
    - dt_start_of_month / dt_end_of_month / dt_subtract_months: Month math
    - dt_short_label / dt_month_label / dt_week_range_label: Report labels
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
import logging
import re
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

# Default timezone - overridden at integration setup
DEFAULT_TIME_ZONE: tzinfo = ZoneInfo("UTC")

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MIDDAY = time(12, 0)

WEEKDAY_SHORT_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


# ==============================================================================
# Timezone Management
# ==============================================================================


def set_default_timezone(tz: tzinfo | None) -> None:
    """Set the module-level default timezone.

    Called once during integration setup with the Home Assistant configured
    timezone. Passing None resets to UTC.
    """
    global DEFAULT_TIME_ZONE  # pylint: disable=global-statement
    DEFAULT_TIME_ZONE = tz if tz is not None else ZoneInfo("UTC")
    _LOGGER.debug("Default timezone set to %s", DEFAULT_TIME_ZONE)


def get_default_timezone() -> tzinfo:
    """Return the module-level default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Time
# ==============================================================================


def dt_today_local() -> date:
    """Return today's date in the local timezone."""
    return datetime.now(DEFAULT_TIME_ZONE).date()


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO string."""
    return datetime.now(UTC).isoformat()


# ==============================================================================
# Parsing and Formatting
# ==============================================================================


def dt_parse_iso_date(value: str | date) -> date:
    """Parse a calendar date string in strict YYYY-MM-DD form.

    Args:
        value: ISO date string, or a date/datetime which is passed through
            (datetimes are reduced to their date component)

    Returns:
        The parsed date

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"Invalid calendar date (expected YYYY-MM-DD): {value!r}")
    return date.fromisoformat(value)


def dt_format_iso_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.isoformat()


def dt_at_midday(value: date) -> datetime:
    """Return the local-midday datetime for a calendar date."""
    return datetime.combine(value, MIDDAY, tzinfo=DEFAULT_TIME_ZONE)


def dt_created_date(created_at: str | date | datetime | None) -> date | None:
    """Return the local calendar date of a creation timestamp.

    Accepts full ISO timestamps (with or without offset), bare YYYY-MM-DD
    strings, and date/datetime objects. Naive timestamps are taken as local.

    Returns:
        The local date, or None when no creation timestamp is available

    Raises:
        ValueError: If the string cannot be parsed
    """
    if created_at is None or created_at == "":
        return None

    if isinstance(created_at, datetime):
        parsed = created_at
    elif isinstance(created_at, date):
        return created_at
    elif ISO_DATE_PATTERN.match(created_at):
        return date.fromisoformat(created_at)
    else:
        parsed = datetime.fromisoformat(created_at)

    if parsed.tzinfo is None:
        return parsed.date()
    return parsed.astimezone(DEFAULT_TIME_ZONE).date()


# ==============================================================================
# Weeks
# ==============================================================================


def dt_weekday_index(value: date) -> int:
    """Return the weekday index of a date, 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def dt_start_of_week(value: date) -> date:
    """Return the Monday of the week containing the date."""
    return value - timedelta(days=value.weekday())


def dt_end_of_week(value: date) -> date:
    """Return the Sunday of the week containing the date."""
    return dt_start_of_week(value) + timedelta(days=6)


def dt_week_key(value: date) -> str:
    """Return a key unique per Monday-start week (ISO week, e.g. 2026-W04)."""
    return dt_at_midday(value).strftime("%G-W%V")


# ==============================================================================
# Ranges
# ==============================================================================


def dt_each_day(start: date, end: date) -> list[date]:
    """Return every date from start to end inclusive.

    Returns an empty list when start is after end.
    """
    if start > end:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def dt_each_week_start(start: date, end: date) -> list[date]:
    """Return the Monday of every week overlapping [start, end]."""
    if start > end:
        return []
    week = dt_start_of_week(start)
    last = dt_start_of_week(end)
    weeks: list[date] = []
    while week <= last:
        weeks.append(week)
        week += timedelta(weeks=1)
    return weeks


# ==============================================================================
# Months
# ==============================================================================


def dt_start_of_month(value: date) -> date:
    """Return the first day of the month containing the date."""
    return value.replace(day=1)


def dt_end_of_month(value: date) -> date:
    """Return the last day of the month containing the date."""
    return dt_start_of_month(value) + relativedelta(months=1, days=-1)


def dt_subtract_months(value: date, months: int) -> date:
    """Return the date shifted back by a number of calendar months.

    Day-of-month is clamped to the target month's length.
    """
    return value - relativedelta(months=months)


# ==============================================================================
# Labels
# ==============================================================================


def dt_short_label(value: date) -> str:
    """Format a date as an abbreviated month and day (e.g. "Jan 20")."""
    return f"{value:%b} {value.day}"


def dt_week_range_label(start: date, end: date) -> str:
    """Format a week range (e.g. "Jan 20 - Jan 26")."""
    return f"{dt_short_label(start)} - {dt_short_label(end)}"


def dt_month_label(value: date) -> str:
    """Format a month label (e.g. "January 2026")."""
    return f"{value:%B %Y}"


def dt_weekday_short_label(index: int) -> str:
    """Return the short weekday label for an index (0=Sunday)."""
    return WEEKDAY_SHORT_LABELS[index]
