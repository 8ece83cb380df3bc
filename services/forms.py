"""Form handlers: turn raw form fields into log entries.

Validation happens here, before any store call. Numeric fields follow the
usual form convention that a blank or unparseable value counts as zero.
"""

import math
from typing import Any, List, Mapping

from schemas.nutrition_log import NutritionLogEntry
from schemas.profile import WorkoutPlan
from schemas.workout_log import WorkoutLogEntry
from utils.errors import ValidationError


def parse_number(value: Any) -> float:
    """Parse a form value; blank, invalid or non-finite input is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def set_field_name(exercise_index: int, set_index: int, field: str) -> str:
    """Name of a set slot field; ``set_index`` is 0-based, ``field`` is weight or reps."""
    return f"ex-{exercise_index}-set-{set_index}-{field}"


def build_workout_entries(
    plan: WorkoutPlan,
    day_label: str,
    form: Mapping[str, Any],
    date: str,
) -> List[WorkoutLogEntry]:
    """One entry per filled set slot of the selected day.

    A slot counts as filled when both weight and reps are positive.

    Raises:
        ValidationError: No day selected, day not in the plan, or no slot
            filled.
    """
    if not day_label:
        raise ValidationError("Please select a workout.")
    exercises = plan.get(day_label)
    if exercises is None:
        raise ValidationError(f"Workout '{day_label}' is not in your plan.")

    entries = []
    for ex_index, exercise in enumerate(exercises):
        for set_index in range(exercise.target_sets):
            weight = parse_number(form.get(set_field_name(ex_index, set_index, "weight")))
            reps = parse_number(form.get(set_field_name(ex_index, set_index, "reps")))
            if weight > 0 and reps > 0:
                entries.append(WorkoutLogEntry(
                    date=date,
                    workout_day_label=day_label,
                    exercise_name=exercise.name,
                    set_index=set_index + 1,
                    weight=weight,
                    reps=reps,
                ))

    if not entries:
        raise ValidationError("No sets filled in.")
    return entries


def build_nutrition_entry(form: Mapping[str, Any], date: str) -> NutritionLogEntry:
    """Food entry from the nutrition form; calories are derived from macros.

    Raises:
        ValidationError: Food name empty or all macros zero.
    """
    food_name = str(form.get("food_name") or "").strip()
    protein = max(parse_number(form.get("protein_grams")), 0.0)
    carbs = max(parse_number(form.get("carb_grams")), 0.0)
    fat = max(parse_number(form.get("fat_grams")), 0.0)

    if not food_name or (protein == 0 and carbs == 0 and fat == 0):
        raise ValidationError("Enter the food name and at least one macro.")

    return NutritionLogEntry.create(
        date=date,
        food_name=food_name,
        protein_grams=protein,
        carb_grams=carbs,
        fat_grams=fat,
    )


def validate_credentials(email: str, password: str) -> None:
    """Both e-mail and password are required before contacting the provider."""
    if not (email or "").strip() or not password:
        raise ValidationError("Please fill in e-mail and password.")
