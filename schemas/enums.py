"""Enums for view and session state."""

from enum import Enum


class Screen(str, Enum):
    """Screens reachable from the tab bar."""
    WORKOUT_ENTRY = "workout_entry"
    NUTRITION_ENTRY = "nutrition_entry"
    PLAN_VIEW = "plan_view"
    HISTORY = "history"
    SETTINGS = "settings"


class ProfileState(str, Enum):
    """Lifecycle of the profile subscription within a session."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
