"""Display groupings and daily totals derived from log snapshots.

All functions are pure: they take the entries of a snapshot, never modify
them, and return freshly built structures.
"""

from dataclasses import dataclass, field
from datetime import date as date_type
from typing import Dict, Iterable, List, Tuple

from schemas.nutrition_log import NutritionLogEntry, NutritionTotals
from schemas.profile import NutritionGoals
from schemas.workout_log import WorkoutLogEntry


@dataclass
class WorkoutDayGroup:
    """Sets logged on one calendar day, grouped by exercise in log order."""
    label: str
    exercises: Dict[str, List[WorkoutLogEntry]] = field(default_factory=dict)

    @property
    def set_count(self) -> int:
        return sum(len(sets) for sets in self.exercises.values())


def group_workouts_by_date(entries: Iterable[WorkoutLogEntry]) -> Dict[str, WorkoutDayGroup]:
    """Group sets by date, then by exercise name.

    The day label comes from the first entry seen for each date; entries of a
    single date are expected to share it.
    """
    groups: Dict[str, WorkoutDayGroup] = {}
    for entry in entries:
        group = groups.get(entry.date)
        if group is None:
            group = groups[entry.date] = WorkoutDayGroup(label=entry.workout_day_label)
        group.exercises.setdefault(entry.exercise_name, []).append(entry)
    return groups


def group_nutrition_by_date(entries: Iterable[NutritionLogEntry]) -> Dict[str, NutritionTotals]:
    """Sum calories and macros per date."""
    totals: Dict[str, NutritionTotals] = {}
    for entry in entries:
        totals[entry.date] = totals.get(entry.date, NutritionTotals()).add(entry)
    return totals


def entries_for_day(entries: Iterable[NutritionLogEntry], day: str) -> List[NutritionLogEntry]:
    """Entries logged on ``day``, in snapshot order."""
    return [entry for entry in entries if entry.date == day]


def summarize_day(entries: Iterable[NutritionLogEntry], day: str) -> NutritionTotals:
    """Totals for a single day; zeros when nothing was logged."""
    totals = NutritionTotals()
    for entry in entries_for_day(entries, day):
        totals = totals.add(entry)
    return totals


def _date_sort_key(value: str) -> Tuple[date_type, str]:
    try:
        return date_type.fromisoformat(value), value
    except ValueError:
        return date_type.min, value


def sort_dates_descending(dates: Iterable[str]) -> List[str]:
    """Calendar order, most recent first."""
    return sorted(dates, key=_date_sort_key, reverse=True)


def format_display_date(value: str) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY; unparseable values are returned as-is."""
    try:
        return date_type.fromisoformat(value).strftime("%d/%m/%Y")
    except ValueError:
        return value


def goal_progress(totals: NutritionTotals, goals: NutritionGoals) -> Dict[str, Dict[str, float]]:
    """Consumed vs goal for calories and each macro.

    Returns a mapping field -> {consumed, goal, remaining, percent}. Remaining
    never goes below zero; percent is 0 when the goal is 0.
    """
    progress = {}
    for name in ("calories", "protein_grams", "carb_grams", "fat_grams"):
        consumed = getattr(totals, name)
        goal = getattr(goals, name)
        progress[name] = {
            "consumed": consumed,
            "goal": goal,
            "remaining": max(goal - consumed, 0.0),
            "percent": round(consumed / goal * 100, 1) if goal else 0.0,
        }
    return progress
