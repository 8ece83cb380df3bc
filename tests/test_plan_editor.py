"""Tests for settings draft edits."""

import pytest

from config.settings import settings
from services import plan_editor
from utils.errors import ValidationError


class TestDays:

    def test_add_day_appends_empty_day(self, two_day_profile):
        edited = plan_editor.add_day(two_day_profile, " Legs ")

        assert list(edited.workout_plan) == ["Push", "Pull", "Legs"]
        assert edited.workout_plan["Legs"] == []
        assert list(two_day_profile.workout_plan) == ["Push", "Pull"]

    @pytest.mark.parametrize("label", ["", "   ", "Push"])
    def test_add_day_rejects_blank_or_duplicate(self, two_day_profile, label):
        with pytest.raises(ValidationError):
            plan_editor.add_day(two_day_profile, label)

    def test_rename_keeps_position_and_exercises(self, two_day_profile):
        edited = plan_editor.rename_day(two_day_profile, "Push", "Push A")

        assert list(edited.workout_plan) == ["Push A", "Pull"]
        assert edited.workout_plan["Push A"] == two_day_profile.workout_plan["Push"]

    def test_rename_to_existing_label_is_rejected(self, two_day_profile):
        with pytest.raises(ValidationError):
            plan_editor.rename_day(two_day_profile, "Push", "Pull")

    def test_remove_day(self, two_day_profile):
        edited = plan_editor.remove_day(two_day_profile, "Pull")

        assert list(edited.workout_plan) == ["Push"]

    def test_remove_unknown_day(self, two_day_profile):
        with pytest.raises(ValidationError):
            plan_editor.remove_day(two_day_profile, "Legs")


class TestExercises:

    def test_add_exercise(self, two_day_profile):
        edited = plan_editor.add_exercise(two_day_profile, "Pull", "Pull-up", target_sets="4", target_reps="6-8")

        added = edited.workout_plan["Pull"][-1]
        assert (added.name, added.target_sets, added.target_reps) == ("Pull-up", 4, "6-8")
        assert len(two_day_profile.workout_plan["Pull"]) == 1

    @pytest.mark.parametrize("name, sets", [("", 3), ("Dip", 0), ("Dip", "none")])
    def test_add_exercise_rejects_invalid(self, two_day_profile, name, sets):
        with pytest.raises(ValidationError):
            plan_editor.add_exercise(two_day_profile, "Pull", name, target_sets=sets)

    def test_update_exercise_changes_only_given_fields(self, two_day_profile):
        edited = plan_editor.update_exercise(two_day_profile, "Push", 1, target_sets=5)

        updated = edited.workout_plan["Push"][1]
        assert (updated.name, updated.target_sets, updated.target_reps) == ("Overhead Press", 5, "8-12")

    def test_update_exercise_out_of_range(self, two_day_profile):
        with pytest.raises(ValidationError):
            plan_editor.update_exercise(two_day_profile, "Push", 7, name="Fly")

    def test_remove_exercise(self, two_day_profile):
        edited = plan_editor.remove_exercise(two_day_profile, "Push", 0)

        assert [e.name for e in edited.workout_plan["Push"]] == ["Overhead Press"]
        assert len(two_day_profile.workout_plan["Push"]) == 2


class TestGoals:

    def test_update_goals(self, two_day_profile):
        edited = plan_editor.update_goals(two_day_profile, calories="2800", fat_grams=90)

        assert edited.nutrition_goals.calories == 2800
        assert edited.nutrition_goals.fat_grams == 90
        assert edited.nutrition_goals.protein_grams == 150
        assert edited.workout_plan == two_day_profile.workout_plan

    def test_unknown_goal(self, two_day_profile):
        with pytest.raises(ValidationError):
            plan_editor.update_goals(two_day_profile, sugar_grams=10)

    def test_negative_goal(self, two_day_profile):
        with pytest.raises(ValidationError):
            plan_editor.update_goals(two_day_profile, calories=-1)


def test_apply_generated_plan_replaces_plan_and_goals(two_day_profile, normalized_plan):
    edited = plan_editor.apply_generated_plan(two_day_profile, normalized_plan)

    assert list(edited.workout_plan) == ["Full Body"]
    assert edited.nutrition_goals == normalized_plan.nutrition_goals


def test_sets_above_limit_are_rejected(two_day_profile):
    with pytest.raises(ValidationError, match="exceed"):
        plan_editor.add_exercise(two_day_profile, "Pull", "Shrug", target_sets=settings.max_target_sets + 1)
