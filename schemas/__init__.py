"""Collection and message schemas."""

from schemas.enums import Screen, ProfileState
from schemas.auth import AuthUser
from schemas.profile import Exercise, WorkoutPlan, NutritionGoals, UserProfile
from schemas.workout_log import WorkoutLogEntry
from schemas.nutrition_log import NutritionLogEntry, NutritionTotals, calories_from_macros
from schemas.websocket import WebSocketMessage, WebSocketResponse

__all__ = [
    "Screen",
    "ProfileState",
    "AuthUser",
    "Exercise",
    "WorkoutPlan",
    "NutritionGoals",
    "UserProfile",
    "WorkoutLogEntry",
    "NutritionLogEntry",
    "NutritionTotals",
    "calories_from_macros",
    "WebSocketMessage",
    "WebSocketResponse",
]
