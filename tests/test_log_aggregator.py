"""Tests for log grouping and daily totals."""

import pytest

from schemas.nutrition_log import NutritionLogEntry, NutritionTotals
from schemas.profile import NutritionGoals
from schemas.workout_log import WorkoutLogEntry
from services import log_aggregator


def _set(date, exercise, set_index, weight=50.0, reps=10.0, label="Push"):
    return WorkoutLogEntry(
        date=date,
        workout_day_label=label,
        exercise_name=exercise,
        set_index=set_index,
        weight=weight,
        reps=reps,
    )


def _food(date, name, protein=10.0, carbs=20.0, fat=5.0):
    return NutritionLogEntry.create(date, name, protein, carbs, fat)


@pytest.fixture
def workout_entries():
    return [
        _set("2024-03-02", "Squat", 1, label="Legs"),
        _set("2024-03-01", "Bench Press", 1),
        _set("2024-03-01", "Bench Press", 2),
        _set("2024-03-01", "Overhead Press", 1),
        _set("2024-03-02", "Squat", 2, label="Legs"),
    ]


@pytest.fixture
def nutrition_entries():
    return [
        _food("2024-03-01", "Oats", protein=13, carbs=68, fat=7),
        _food("2024-03-02", "Chicken", protein=31, carbs=0, fat=3.6),
        _food("2024-03-01", "Eggs", protein=13, carbs=1, fat=11),
    ]


class TestWorkoutGrouping:

    def test_groups_by_date_then_exercise(self, workout_entries):
        groups = log_aggregator.group_workouts_by_date(workout_entries)

        assert set(groups) == {"2024-03-01", "2024-03-02"}
        assert groups["2024-03-01"].label == "Push"
        assert list(groups["2024-03-01"].exercises) == ["Bench Press", "Overhead Press"]
        assert [s.set_index for s in groups["2024-03-01"].exercises["Bench Press"]] == [1, 2]
        assert groups["2024-03-02"].label == "Legs"

    def test_set_count_is_preserved(self, workout_entries):
        groups = log_aggregator.group_workouts_by_date(workout_entries)

        assert sum(group.set_count for group in groups.values()) == len(workout_entries)

    def test_first_label_wins_for_a_date(self):
        entries = [_set("2024-03-01", "Curl", 1, label="Arms"), _set("2024-03-01", "Row", 1, label="Pull")]

        assert log_aggregator.group_workouts_by_date(entries)["2024-03-01"].label == "Arms"

    def test_empty_input(self):
        assert log_aggregator.group_workouts_by_date([]) == {}


class TestNutritionTotals:

    def test_partition_sums_match_overall_sums(self, nutrition_entries):
        totals = log_aggregator.group_nutrition_by_date(nutrition_entries)

        assert sum(t.calories for t in totals.values()) == pytest.approx(sum(e.calories for e in nutrition_entries))
        assert sum(t.protein_grams for t in totals.values()) == pytest.approx(57)
        assert totals["2024-03-01"].carb_grams == pytest.approx(69)
        assert totals["2024-03-02"].fat_grams == pytest.approx(3.6)

    def test_summarize_day(self, nutrition_entries):
        totals = log_aggregator.summarize_day(nutrition_entries, "2024-03-01")

        assert totals.protein_grams == pytest.approx(26)
        assert totals.calories == pytest.approx(26 * 4 + 69 * 4 + 18 * 9)

    def test_summarize_day_without_entries_is_zero(self, nutrition_entries):
        assert log_aggregator.summarize_day(nutrition_entries, "1999-01-01") == NutritionTotals()

    def test_entries_for_day_keeps_order(self, nutrition_entries):
        names = [e.food_name for e in log_aggregator.entries_for_day(nutrition_entries, "2024-03-01")]

        assert names == ["Oats", "Eggs"]

    def test_goal_progress(self):
        totals = NutritionTotals(calories=1500, protein_grams=200, carb_grams=0, fat_grams=40)
        goals = NutritionGoals(calories=3000, protein_grams=160, carb_grams=0, fat_grams=80)

        progress = log_aggregator.goal_progress(totals, goals)

        assert progress["calories"] == {"consumed": 1500, "goal": 3000, "remaining": 1500, "percent": 50.0}
        assert progress["protein_grams"]["remaining"] == 0.0
        assert progress["protein_grams"]["percent"] == 125.0
        assert progress["carb_grams"]["percent"] == 0.0


class TestDates:

    def test_dates_sorted_most_recent_first(self):
        dates = ["2024-01-15", "2023-12-31", "2024-02-01", "2024-01-02"]

        assert log_aggregator.sort_dates_descending(dates) == [
            "2024-02-01", "2024-01-15", "2024-01-02", "2023-12-31",
        ]

    def test_unparseable_dates_sort_last(self):
        assert log_aggregator.sort_dates_descending(["garbage", "2024-01-01"]) == ["2024-01-01", "garbage"]

    def test_display_date(self):
        assert log_aggregator.format_display_date("2024-03-07") == "07/03/2024"
        assert log_aggregator.format_display_date("soon") == "soon"
