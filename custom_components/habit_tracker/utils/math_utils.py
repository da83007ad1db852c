# File: utils/math_utils.py
"""Math and calculation utilities for Habit Tracker.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - round_half_up: Round to nearest integer, halves rounding up
    - calculate_rate: Completion ratio clamped to [0.0, 1.0]
    - calculate_percentage: Whole-number percentage of a rate
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding toward +infinity.

    Examples:
        round_half_up(62.5) → 63
        round_half_up(42.857) → 43
        round_half_up(-0.5) → 0
    """
    return math.floor(value + 0.5)


def calculate_rate(completed: int, expected: int) -> float:
    """Return completed / expected, clamped to [0.0, 1.0].

    Args:
        completed: Number of satisfied units (days or weeks)
        expected: Number of applicable units

    Returns:
        0.0 when nothing was expected, otherwise the ratio capped at 1.0
    """
    if expected <= 0:
        return 0.0
    return max(0.0, min(1.0, completed / expected))


def calculate_percentage(rate: float) -> int:
    """Return a rate as a whole-number percentage, capped at 100."""
    return min(100, round_half_up(rate * 100))
