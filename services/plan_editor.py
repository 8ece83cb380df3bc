"""Edits to the settings draft of a profile.

Each function returns a new ``UserProfile`` and leaves its argument as it
was; the draft only reaches the store when the user saves it.
"""

from typing import Dict, List, Optional

from config.settings import settings
from schemas.profile import Exercise, NutritionGoals, UserProfile, WorkoutPlan
from services.forms import parse_number
from services.plan_normalizer import NormalizedPlan
from utils.errors import ValidationError


def _copy_plan(profile: UserProfile) -> WorkoutPlan:
    return {label: list(exercises) for label, exercises in profile.workout_plan.items()}


def _with_plan(profile: UserProfile, plan: WorkoutPlan) -> UserProfile:
    return UserProfile(workout_plan=plan, nutrition_goals=profile.nutrition_goals)


def _day(plan: WorkoutPlan, label: str) -> List[Exercise]:
    if label not in plan:
        raise ValidationError(f"Workout '{label}' is not in your plan.")
    return plan[label]


def add_day(profile: UserProfile, label: str) -> UserProfile:
    label = (label or "").strip()
    if not label:
        raise ValidationError("Workout name is required.")
    if label in profile.workout_plan:
        raise ValidationError(f"Workout '{label}' already exists.")
    plan = _copy_plan(profile)
    plan[label] = []
    return _with_plan(profile, plan)


def rename_day(profile: UserProfile, label: str, new_label: str) -> UserProfile:
    """Rename a day in place, keeping its position in the plan."""
    new_label = (new_label or "").strip()
    _day(profile.workout_plan, label)
    if not new_label:
        raise ValidationError("Workout name is required.")
    if new_label != label and new_label in profile.workout_plan:
        raise ValidationError(f"Workout '{new_label}' already exists.")
    plan = {
        (new_label if key == label else key): list(exercises)
        for key, exercises in profile.workout_plan.items()
    }
    return _with_plan(profile, plan)


def remove_day(profile: UserProfile, label: str) -> UserProfile:
    plan = _copy_plan(profile)
    _day(plan, label)
    del plan[label]
    return _with_plan(profile, plan)


def _build_exercise(name: str, target_sets, target_reps) -> Exercise:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Exercise name is required.")
    sets = int(parse_number(target_sets))
    if sets < 1:
        raise ValidationError("Sets must be at least 1.")
    if sets > settings.max_target_sets:
        raise ValidationError(f"Sets cannot exceed {settings.max_target_sets}.")
    return Exercise(name=name, target_sets=sets, target_reps=str(target_reps or "").strip())


def add_exercise(profile: UserProfile, label: str, name: str, target_sets=1, target_reps="") -> UserProfile:
    plan = _copy_plan(profile)
    _day(plan, label).append(_build_exercise(name, target_sets, target_reps))
    return _with_plan(profile, plan)


def update_exercise(
    profile: UserProfile,
    label: str,
    index: int,
    name: Optional[str] = None,
    target_sets=None,
    target_reps=None,
) -> UserProfile:
    """Replace the fields given; omitted fields keep their current value."""
    plan = _copy_plan(profile)
    exercises = _day(plan, label)
    if not 0 <= index < len(exercises):
        raise ValidationError("Exercise not found.")
    current = exercises[index]
    exercises[index] = _build_exercise(
        current.name if name is None else name,
        current.target_sets if target_sets is None else target_sets,
        current.target_reps if target_reps is None else target_reps,
    )
    return _with_plan(profile, plan)


def remove_exercise(profile: UserProfile, label: str, index: int) -> UserProfile:
    plan = _copy_plan(profile)
    exercises = _day(plan, label)
    if not 0 <= index < len(exercises):
        raise ValidationError("Exercise not found.")
    del exercises[index]
    return _with_plan(profile, plan)


def update_goals(profile: UserProfile, **values) -> UserProfile:
    """Set any of calories, protein_grams, carb_grams, fat_grams."""
    current: Dict[str, float] = profile.nutrition_goals.model_dump()
    for key, value in values.items():
        if key not in current:
            raise ValidationError(f"Unknown nutrition goal '{key}'.")
        number = parse_number(value)
        if number < 0:
            raise ValidationError("Nutrition goals cannot be negative.")
        current[key] = number
    return UserProfile(workout_plan=_copy_plan(profile), nutrition_goals=NutritionGoals(**current))


def apply_generated_plan(profile: UserProfile, generated: NormalizedPlan) -> UserProfile:
    """Replace plan and goals of the draft with a generated result."""
    return UserProfile(
        workout_plan={label: list(exercises) for label, exercises in generated.workout_plan.items()},
        nutrition_goals=generated.nutrition_goals,
    )


EDIT_OPERATIONS = {
    "add_day": add_day,
    "rename_day": rename_day,
    "remove_day": remove_day,
    "add_exercise": add_exercise,
    "update_exercise": update_exercise,
    "remove_exercise": remove_exercise,
}
