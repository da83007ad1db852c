"""Tests for the Habit Tracker integration."""
