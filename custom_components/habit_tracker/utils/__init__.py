# File: utils/__init__.py
"""Pure Python utilities for Habit Tracker.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed in this module.

Submodules:
    - dt_utils: Calendar parsing, week/month math, report labels
    - math_utils: Rate clamping and percentage rounding

Usage:
    from . import dt_utils
    from .math_utils import calculate_rate
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
