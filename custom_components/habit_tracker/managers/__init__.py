"""Manager modules for Habit Tracker integration.

Managers orchestrate workflows and coordinate between engines and storage.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .category_manager import CategoryManager
from .completion_manager import CompletionManager
from .gamification_manager import GamificationManager
from .habit_manager import HabitManager
from .statistics_manager import StatisticsManager

__all__ = [
    "BaseManager",
    "CategoryManager",
    "CompletionManager",
    "GamificationManager",
    "HabitManager",
    "StatisticsManager",
]
