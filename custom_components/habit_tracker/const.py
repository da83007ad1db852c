# File: const.py
"""Constants for the Habit Tracker integration.

This file centralizes configuration keys, defaults, storage keys, domain names,
event names, service names and the achievement catalog for consistency across
the integration.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
HABIT_TRACKER_TITLE = "Habit Tracker"

# Integration Domain
DOMAIN = "habit_tracker"

# Logger
LOGGER = logging.getLogger(__package__)

# Storage and Versioning
STORAGE_MANAGER = "storage_manager"
STORAGE_KEY = "habit_tracker_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Managers (hass.data[DOMAIN][entry_id] keys)
HABIT_MANAGER = "habit_manager"
COMPLETION_MANAGER = "completion_manager"
GAMIFICATION_MANAGER = "gamification_manager"
STATISTICS_MANAGER = "statistics_manager"
CATEGORY_MANAGER = "category_manager"


# ------------------------------------------------------------------------------------------------
# Storage Data Keys
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_CREATED_AT = "created_at"

DATA_HABITS = "habits"
DATA_CATEGORIES = "categories"
DATA_COMPLETIONS = "completions"
DATA_USER_STATS = "user_stats"
DATA_ACHIEVEMENTS = "achievements"

# Habit fields
DATA_HABIT_ID = "id"
DATA_HABIT_NAME = "name"
DATA_HABIT_DESCRIPTION = "description"
DATA_HABIT_FREQUENCY = "frequency"
DATA_HABIT_FREQUENCY_DAYS = "frequency_days"
DATA_HABIT_COLOR = "color"
DATA_HABIT_ICON = "icon"
DATA_HABIT_CATEGORY_ID = "category_id"
DATA_HABIT_POSITION = "position"
DATA_HABIT_ARCHIVED = "archived"
DATA_HABIT_CREATED_AT = "created_at"
DATA_HABIT_UPDATED_AT = "updated_at"

# Category fields (stored as categories[category_id])
DATA_CATEGORY_ID = "id"
DATA_CATEGORY_NAME = "name"
DATA_CATEGORY_COLOR = "color"
DATA_CATEGORY_CREATED_AT = "created_at"

# Completion fields (stored as completions[habit_id][completed_date])
DATA_COMPLETION_HABIT_ID = "habit_id"
DATA_COMPLETION_DATE = "completed_date"
DATA_COMPLETION_NOTES = "notes"
DATA_COMPLETION_CREATED_AT = "created_at"

# User stats fields (single row)
DATA_USER_STATS_TOTAL_XP = "total_xp"
DATA_USER_STATS_LEVEL = "level"
DATA_USER_STATS_UPDATED_AT = "updated_at"

# Unlocked achievement fields (stored as achievements[achievement_id])
DATA_ACHIEVEMENT_UNLOCKED_AT = "unlocked_at"
DATA_ACHIEVEMENT_METADATA = "metadata"
DATA_ACHIEVEMENT_METADATA_NAME = "name"


# ------------------------------------------------------------------------------------------------
# Habits
# ------------------------------------------------------------------------------------------------
FREQUENCY_DAILY: Final = "daily"
FREQUENCY_WEEKLY: Final = "weekly"
FREQUENCY_CUSTOM: Final = "custom"
FREQUENCY_OPTIONS: Final = [FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_CUSTOM]

DEFAULT_HABIT_COLOR = "#6366f1"
DEFAULT_HABIT_ICON = "circle-check"
HABIT_NAME_MAX_LENGTH = 100
HABIT_DESCRIPTION_MAX_LENGTH = 500
WEEKDAY_INDEX_MIN = 0
WEEKDAY_INDEX_MAX = 6
CATEGORY_NAME_MAX_LENGTH = 50


# ------------------------------------------------------------------------------------------------
# Statistics and Reports
# ------------------------------------------------------------------------------------------------
WINDOW_ALL: Final = "all"
RATE_WINDOW_WEEK = 7
RATE_WINDOW_MONTH = 30
COMPARISON_WINDOW_DAYS = 30

DEFAULT_HEATMAP_DAYS = 365
DEFAULT_SUMMARY_WEEKS = 8
DEFAULT_SUMMARY_MONTHS = 6
DEFAULT_TREND_WEEKS = 12
DEFAULT_COMPARISON_TOP_N = 3
DEFAULT_PATTERN_DAYS = 90

# Heatmap intensity thresholds (count / max_count), levels 1..4
HEATMAP_LEVEL_THRESHOLDS: Final = (0.25, 0.5, 0.75)


# ------------------------------------------------------------------------------------------------
# Config / Options Flow
# ------------------------------------------------------------------------------------------------
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"
ABORT_SINGLE_INSTANCE_ALLOWED = "single_instance_allowed"

CONF_SUMMARY_WEEKS = "summary_weeks"
CONF_SUMMARY_MONTHS = "summary_months"
CONF_TREND_WEEKS = "trend_weeks"
CONF_PATTERN_DAYS = "pattern_days"
CONF_COMPARISON_TOP_N = "comparison_top_n"

DEFAULT_OPTIONS: Final = {
    CONF_SUMMARY_WEEKS: DEFAULT_SUMMARY_WEEKS,
    CONF_SUMMARY_MONTHS: DEFAULT_SUMMARY_MONTHS,
    CONF_TREND_WEEKS: DEFAULT_TREND_WEEKS,
    CONF_PATTERN_DAYS: DEFAULT_PATTERN_DAYS,
    CONF_COMPARISON_TOP_N: DEFAULT_COMPARISON_TOP_N,
}

# Inclusive (min, max) bounds accepted by the options flow
OPTION_RANGES: Final = {
    CONF_SUMMARY_WEEKS: (1, 52),
    CONF_SUMMARY_MONTHS: (1, 24),
    CONF_TREND_WEEKS: (1, 104),
    CONF_PATTERN_DAYS: (7, 365),
    CONF_COMPARISON_TOP_N: (1, 20),
}


# ------------------------------------------------------------------------------------------------
# Gamification
# ------------------------------------------------------------------------------------------------
XP_PER_COMPLETION = 10
STREAK_BONUS_MULTIPLIER = 2
XP_LEVEL_BASE = 50
DEFAULT_LEVEL = 1
MAX_LEVEL = 50

ACHIEVEMENT_CATEGORY_STREAK = "streak"
ACHIEVEMENT_CATEGORY_COMPLETION = "completion"
ACHIEVEMENT_CATEGORY_VARIETY = "variety"
ACHIEVEMENT_CATEGORY_LEVEL = "level"

# Streak achievements
ACHIEVEMENT_FIRST_FLAME = "first-flame"
ACHIEVEMENT_WEEK_WARRIOR = "week-warrior"
ACHIEVEMENT_FORTNIGHT_FORCE = "fortnight-force"
ACHIEVEMENT_MONTHLY_MASTER = "monthly-master"
ACHIEVEMENT_CENTURY_STREAK = "century-streak"
# Completion achievements
ACHIEVEMENT_FIRST_STEP = "first-step"
ACHIEVEMENT_GETTING_STARTED = "getting-started"
ACHIEVEMENT_HALF_CENTURY = "half-century"
ACHIEVEMENT_CENTURY_CLUB = "century-club"
ACHIEVEMENT_HABIT_MACHINE = "habit-machine"
# Variety achievements
ACHIEVEMENT_HABIT_CREATOR = "habit-creator"
ACHIEVEMENT_COLLECTOR = "collector"
ACHIEVEMENT_DIVERSIFIED = "diversified"
# Level achievements
ACHIEVEMENT_LEVEL_5 = "level-5"
ACHIEVEMENT_LEVEL_10 = "level-10"
ACHIEVEMENT_LEVEL_25 = "level-25"

# Achievements evaluated when a habit is created (completion stats untouched)
HABIT_CREATION_ACHIEVEMENTS: Final = (ACHIEVEMENT_HABIT_CREATOR, ACHIEVEMENT_COLLECTOR)

# Display catalog, in evaluation order
ACHIEVEMENTS: Final = (
    {
        "id": ACHIEVEMENT_FIRST_FLAME,
        "name": "First Flame",
        "description": "Your first spark! Achieve a 3-day streak.",
        "category": ACHIEVEMENT_CATEGORY_STREAK,
        "icon": "flame",
    },
    {
        "id": ACHIEVEMENT_WEEK_WARRIOR,
        "name": "Week Warrior",
        "description": "A full week of consistency! 7-day streak.",
        "category": ACHIEVEMENT_CATEGORY_STREAK,
        "icon": "sword",
    },
    {
        "id": ACHIEVEMENT_FORTNIGHT_FORCE,
        "name": "Fortnight Force",
        "description": "Two weeks strong! 14-day streak.",
        "category": ACHIEVEMENT_CATEGORY_STREAK,
        "icon": "shield",
    },
    {
        "id": ACHIEVEMENT_MONTHLY_MASTER,
        "name": "Monthly Master",
        "description": "A whole month! Incredible! 30-day streak.",
        "category": ACHIEVEMENT_CATEGORY_STREAK,
        "icon": "crown",
    },
    {
        "id": ACHIEVEMENT_CENTURY_STREAK,
        "name": "Century Streak",
        "description": "100 days. Legendary.",
        "category": ACHIEVEMENT_CATEGORY_STREAK,
        "icon": "trophy",
    },
    {
        "id": ACHIEVEMENT_FIRST_STEP,
        "name": "First Step",
        "description": "Every journey begins with a single step.",
        "category": ACHIEVEMENT_CATEGORY_COMPLETION,
        "icon": "footprints",
    },
    {
        "id": ACHIEVEMENT_GETTING_STARTED,
        "name": "Getting Started",
        "description": "Building momentum! 10 completions.",
        "category": ACHIEVEMENT_CATEGORY_COMPLETION,
        "icon": "rocket",
    },
    {
        "id": ACHIEVEMENT_HALF_CENTURY,
        "name": "Half Century",
        "description": "50 habits completed!",
        "category": ACHIEVEMENT_CATEGORY_COMPLETION,
        "icon": "star",
    },
    {
        "id": ACHIEVEMENT_CENTURY_CLUB,
        "name": "Century Club",
        "description": "100 completions. You're committed!",
        "category": ACHIEVEMENT_CATEGORY_COMPLETION,
        "icon": "medal",
    },
    {
        "id": ACHIEVEMENT_HABIT_MACHINE,
        "name": "Habit Machine",
        "description": "500! You're a habit machine!",
        "category": ACHIEVEMENT_CATEGORY_COMPLETION,
        "icon": "cog",
    },
    {
        "id": ACHIEVEMENT_HABIT_CREATOR,
        "name": "Habit Creator",
        "description": "Your first habit is born!",
        "category": ACHIEVEMENT_CATEGORY_VARIETY,
        "icon": "plus-circle",
    },
    {
        "id": ACHIEVEMENT_COLLECTOR,
        "name": "Collector",
        "description": "Building your habit collection. 5 habits created.",
        "category": ACHIEVEMENT_CATEGORY_VARIETY,
        "icon": "layers",
    },
    {
        "id": ACHIEVEMENT_DIVERSIFIED,
        "name": "Diversified",
        "description": "Variety is the spice of life! 3 different habits in one day.",
        "category": ACHIEVEMENT_CATEGORY_VARIETY,
        "icon": "sparkles",
    },
    {
        "id": ACHIEVEMENT_LEVEL_5,
        "name": "Level 5",
        "description": "Rising to level 5!",
        "category": ACHIEVEMENT_CATEGORY_LEVEL,
        "icon": "arrow-up",
    },
    {
        "id": ACHIEVEMENT_LEVEL_10,
        "name": "Level 10",
        "description": "Double digits!",
        "category": ACHIEVEMENT_CATEGORY_LEVEL,
        "icon": "zap",
    },
    {
        "id": ACHIEVEMENT_LEVEL_25,
        "name": "Level 25",
        "description": "Quarter century level!",
        "category": ACHIEVEMENT_CATEGORY_LEVEL,
        "icon": "gem",
    },
)

ACHIEVEMENT_MAP: Final = {entry["id"]: entry for entry in ACHIEVEMENTS}

# Qualification metrics read from the achievement check context
ACHIEVEMENT_METRIC_STREAK = "streak"
ACHIEVEMENT_METRIC_COMPLETIONS = "completions"
ACHIEVEMENT_METRIC_HABITS_CREATED = "habits_created"
ACHIEVEMENT_METRIC_HABITS_IN_DAY = "habits_in_day"
ACHIEVEMENT_METRIC_LEVEL = "level"

# achievement_id -> (metric, threshold)
ACHIEVEMENT_RULES: Final = {
    ACHIEVEMENT_FIRST_FLAME: (ACHIEVEMENT_METRIC_STREAK, 3),
    ACHIEVEMENT_WEEK_WARRIOR: (ACHIEVEMENT_METRIC_STREAK, 7),
    ACHIEVEMENT_FORTNIGHT_FORCE: (ACHIEVEMENT_METRIC_STREAK, 14),
    ACHIEVEMENT_MONTHLY_MASTER: (ACHIEVEMENT_METRIC_STREAK, 30),
    ACHIEVEMENT_CENTURY_STREAK: (ACHIEVEMENT_METRIC_STREAK, 100),
    ACHIEVEMENT_FIRST_STEP: (ACHIEVEMENT_METRIC_COMPLETIONS, 1),
    ACHIEVEMENT_GETTING_STARTED: (ACHIEVEMENT_METRIC_COMPLETIONS, 10),
    ACHIEVEMENT_HALF_CENTURY: (ACHIEVEMENT_METRIC_COMPLETIONS, 50),
    ACHIEVEMENT_CENTURY_CLUB: (ACHIEVEMENT_METRIC_COMPLETIONS, 100),
    ACHIEVEMENT_HABIT_MACHINE: (ACHIEVEMENT_METRIC_COMPLETIONS, 500),
    ACHIEVEMENT_HABIT_CREATOR: (ACHIEVEMENT_METRIC_HABITS_CREATED, 1),
    ACHIEVEMENT_COLLECTOR: (ACHIEVEMENT_METRIC_HABITS_CREATED, 5),
    ACHIEVEMENT_DIVERSIFIED: (ACHIEVEMENT_METRIC_HABITS_IN_DAY, 3),
    ACHIEVEMENT_LEVEL_5: (ACHIEVEMENT_METRIC_LEVEL, 5),
    ACHIEVEMENT_LEVEL_10: (ACHIEVEMENT_METRIC_LEVEL, 10),
    ACHIEVEMENT_LEVEL_25: (ACHIEVEMENT_METRIC_LEVEL, 25),
}


# ------------------------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------------------------
# Fired on the Home Assistant bus (automation triggers)
EVENT_LEVEL_UP = f"{DOMAIN}_level_up"
EVENT_ACHIEVEMENT_UNLOCKED = f"{DOMAIN}_achievement_unlocked"

# Instance-scoped dispatcher signal suffixes (manager-to-manager)
SIGNAL_SUFFIX_HABITS_CHANGED = "habits_changed"
SIGNAL_SUFFIX_COMPLETIONS_CHANGED = "completions_changed"
SIGNAL_SUFFIX_CATEGORIES_CHANGED = "categories_changed"


# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_CREATE_HABIT = "create_habit"
SERVICE_UPDATE_HABIT = "update_habit"
SERVICE_ARCHIVE_HABIT = "archive_habit"
SERVICE_UNARCHIVE_HABIT = "unarchive_habit"
SERVICE_REORDER_HABITS = "reorder_habits"
SERVICE_CREATE_CATEGORY = "create_category"
SERVICE_UPDATE_CATEGORY = "update_category"
SERVICE_DELETE_CATEGORY = "delete_category"
SERVICE_GET_CATEGORIES = "get_categories"
SERVICE_TOGGLE_COMPLETION = "toggle_completion"
SERVICE_SET_COMPLETION_NOTES = "set_completion_notes"
SERVICE_GET_HABIT_STATS = "get_habit_stats"
SERVICE_GET_HABITS_FOR_DATE = "get_habits_for_date"
SERVICE_GET_ANALYTICS = "get_analytics"
SERVICE_GET_GAMIFICATION_STATUS = "get_gamification_status"
SERVICE_GET_ACHIEVEMENTS = "get_achievements"

SERVICES: Final = (
    SERVICE_CREATE_HABIT,
    SERVICE_UPDATE_HABIT,
    SERVICE_ARCHIVE_HABIT,
    SERVICE_UNARCHIVE_HABIT,
    SERVICE_REORDER_HABITS,
    SERVICE_CREATE_CATEGORY,
    SERVICE_UPDATE_CATEGORY,
    SERVICE_DELETE_CATEGORY,
    SERVICE_GET_CATEGORIES,
    SERVICE_TOGGLE_COMPLETION,
    SERVICE_SET_COMPLETION_NOTES,
    SERVICE_GET_HABIT_STATS,
    SERVICE_GET_HABITS_FOR_DATE,
    SERVICE_GET_ANALYTICS,
    SERVICE_GET_GAMIFICATION_STATUS,
    SERVICE_GET_ACHIEVEMENTS,
)

FIELD_HABIT_ID = "habit_id"
FIELD_HABIT_IDS = "habit_ids"
FIELD_NAME = "name"
FIELD_DESCRIPTION = "description"
FIELD_FREQUENCY = "frequency"
FIELD_FREQUENCY_DAYS = "frequency_days"
FIELD_COLOR = "color"
FIELD_ICON = "icon"
FIELD_CATEGORY_ID = "category_id"
FIELD_DATE = "date"
FIELD_NOTES = "notes"


# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
ERROR_HABIT_NOT_FOUND_FMT = "Habit '{}' not found"
ERROR_CATEGORY_NOT_FOUND_FMT = "Category '{}' not found"
ERROR_UNKNOWN_FREQUENCY_FMT = "Unknown habit frequency '{}'"
ERROR_NEGATIVE_WINDOW_FMT = "Window must be a non-negative day count or 'all', got {}"
ERROR_NEGATIVE_COUNT_FMT = "{} must be non-negative, got {}"
MSG_NO_ENTRY_FOUND = "No Habit Tracker entry found"
