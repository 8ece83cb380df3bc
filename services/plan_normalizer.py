"""Normalization of AI-generated plans into the profile shape.

The generation endpoint answers with a list of days::

    {"nutritionGoals": {...},
     "workoutPlan": [{"dayName": "Push A",
                      "exercises": [{"exercicio": "...", "series": 4, "reps": "6-10"}]}]}

while profiles store the plan keyed by day label. Upstream output is not
guaranteed to be structurally perfect, so malformed days are skipped rather
than failing the whole response; only a response with no usable day, or
without the top-level keys, is rejected.
"""

import math
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, List, Optional

from config.settings import settings
from schemas.profile import Exercise, NutritionGoals, WorkoutPlan
from utils.errors import EmptyPlanError, PartialPlanWarning, SchemaError
from utils.logger import setup_logger

logger = setup_logger(__name__)

# Accepted keys per goal field: request schema first, then the legacy names
GOAL_KEYS = {
    "calories": ("calories", "calorias"),
    "protein_grams": ("proteinGrams", "protein", "proteinas"),
    "carb_grams": ("carbGrams", "carbs", "carboidratos"),
    "fat_grams": ("fatGrams", "fat", "gorduras"),
}


@dataclass
class NormalizedPlan:
    """Result of normalizing one AI response."""
    workout_plan: WorkoutPlan
    nutrition_goals: NutritionGoals
    skipped_days: int = 0
    warning: Optional[PartialPlanWarning] = None

    @property
    def is_partial(self) -> bool:
        return self.warning is not None

    @property
    def day_labels(self) -> List[str]:
        return list(self.workout_plan)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _normalize_goals(raw: Any) -> NutritionGoals:
    if not isinstance(raw, Mapping):
        raise SchemaError("AI response has no nutritionGoals object.")

    values = {}
    for field_name, keys in GOAL_KEYS.items():
        value = next((raw[key] for key in keys if raw.get(key) is not None), 0)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise SchemaError(f"Nutrition goal '{field_name}' is not a number: {value!r}")
        if not math.isfinite(number):
            raise SchemaError(f"Nutrition goal '{field_name}' is not a finite number: {value!r}")
        if number < 0:
            raise SchemaError(f"Nutrition goal '{field_name}' is negative: {number}")
        values[field_name] = number
    return NutritionGoals(**values)


def _coerce_sets(value: Any) -> int:
    """Whole number of sets between 1 and ``settings.max_target_sets``."""
    try:
        sets = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return min(max(1, sets), settings.max_target_sets)


def _normalize_exercise(raw: Any) -> Optional[Exercise]:
    if not isinstance(raw, Mapping):
        return None
    name = raw.get("exercicio")
    if not name:
        return None
    reps = raw.get("reps")
    return Exercise(
        name=str(name),
        target_sets=_coerce_sets(raw.get("series")),
        target_reps="" if reps is None else str(reps),
    )


def normalize_generated_plan(payload: Any, expected_days: Optional[int] = None) -> NormalizedPlan:
    """Reshape a parsed AI response into a keyed workout plan and goals.

    Args:
        payload: Parsed JSON object returned by the generation endpoint.
        expected_days: Canonical number of days; defaults to
            ``settings.canonical_plan_days``.

    Returns:
        NormalizedPlan whose ``warning`` is set when fewer days than expected
        survived normalization.

    Raises:
        SchemaError: ``nutritionGoals`` missing or invalid, or ``workoutPlan``
            not a list.
        EmptyPlanError: No day survived normalization.
    """
    expected = expected_days or settings.canonical_plan_days

    if not isinstance(payload, Mapping):
        raise SchemaError("AI response is not a JSON object.")
    if "nutritionGoals" not in payload:
        raise SchemaError("AI response has no nutritionGoals object.")
    goals = _normalize_goals(payload["nutritionGoals"])

    days = payload.get("workoutPlan")
    if not _is_sequence(days):
        raise SchemaError("AI response workoutPlan is not a list of days.")

    plan: WorkoutPlan = {}
    skipped = 0
    for day in days:
        if not isinstance(day, Mapping):
            skipped += 1
            continue
        label = day.get("dayName")
        exercises = day.get("exercises")
        if not label or not _is_sequence(exercises):
            skipped += 1
            continue
        label = str(label)
        if label in plan:
            logger.warning(f"Duplicate day '{label}' in generated plan; keeping the first")
            skipped += 1
            continue
        plan[label] = [ex for ex in map(_normalize_exercise, exercises) if ex is not None]

    if not plan:
        raise EmptyPlanError("The generated plan has no usable training days.")

    if skipped:
        logger.info(f"Skipped {skipped} malformed day(s) in generated plan")

    warning = None
    if len(plan) < expected:
        warning = PartialPlanWarning(len(plan), expected)
        warnings.warn(warning, stacklevel=2)

    return NormalizedPlan(
        workout_plan=plan,
        nutrition_goals=goals,
        skipped_days=skipped,
        warning=warning,
    )
