"""Session view state: active screen, live snapshots and user actions.

One controller exists per signed-in connection. It consumes the profile and
log streams, exposes the active screen's view model through ``render`` and
dispatches user actions to the store adapters. Failures never escape an
action: they become notifications and the last valid state is kept.
"""

import asyncio
from typing import Any, Callable, Dict, List, Mapping, Optional

from schemas.auth import AuthUser
from schemas.enums import ProfileState, Screen
from schemas.nutrition_log import NutritionLogEntry
from schemas.profile import UserProfile
from schemas.workout_log import WorkoutLogEntry
from services import log_aggregator, plan_editor
from services.forms import build_nutrition_entry, build_workout_entries, set_field_name
from utils.errors import TrainingDiaryError, ValidationError
from utils.helpers import get_today_date_string
from utils.logger import setup_logger

logger = setup_logger(__name__)


class ViewController:
    """Orchestrates one user's screens and actions."""

    def __init__(
        self,
        user: AuthUser,
        profile_store,
        log_store,
        plan_generator,
        notifier,
        on_change: Optional[Callable[[], None]] = None,
        today: Callable[[], str] = get_today_date_string,
    ):
        self.user = user
        self.profile_store = profile_store
        self.log_store = log_store
        self.plan_generator = plan_generator
        self.notifier = notifier
        self.on_change = on_change
        self.today = today

        self.screen = Screen.WORKOUT_ENTRY
        self.profile_state = ProfileState.UNINITIALIZED
        self.profile: Optional[UserProfile] = None
        self.draft: Optional[UserProfile] = None
        self.draft_dirty = False
        self.workout_log: List[WorkoutLogEntry] = []
        self.nutrition_log: List[NutritionLogEntry] = []
        self.selected_day = ""
        self.generating = False

        self.active = False
        self.ready = asyncio.Event()
        self._generation = 0
        self._profile_task: Optional[asyncio.Task] = None
        self._log_tasks: Dict[str, asyncio.Task] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Open the profile and log streams."""
        self.active = True
        self._start_profile_stream()
        self._start_log_streams()
        logger.info(f"Session started for user {self.user.uid}")

    async def stop(self) -> None:
        """Unsubscribe from every stream; pending AI results are discarded."""
        self.active = False
        tasks = [t for t in [self._profile_task, *self._log_tasks.values()] if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._profile_task = None
        self._log_tasks = {}
        self.notifier.close()
        logger.info(f"Session stopped for user {self.user.uid}")

    def retry(self) -> bool:
        """Resubscribe every stream that ended with an error.

        Returns True if at least one stream was restarted.
        """
        if not self.active:
            return False
        restarted = False
        if self.profile_state == ProfileState.ERROR:
            self._start_profile_stream()
            restarted = True
        failed_logs = [name for name, task in self._log_tasks.items() if task.done()]
        if failed_logs:
            self._start_log_streams(failed_logs)
            restarted = True
        if restarted:
            logger.info(f"Retrying live updates for user {self.user.uid}")
        return restarted

    def _start_profile_stream(self) -> None:
        self.profile_state = ProfileState.LOADING
        self._profile_task = asyncio.create_task(self._consume_profile())
        self._changed()

    def _start_log_streams(self, names=("workout", "nutrition")) -> None:
        consumers = {
            "workout": self._consume_workout_log,
            "nutrition": self._consume_nutrition_log,
        }
        for name in names:
            self._log_tasks[name] = asyncio.create_task(consumers[name]())

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()

    def _fail(self, error: Exception, context: str) -> None:
        if isinstance(error, TrainingDiaryError):
            logger.warning(f"{context} for user {self.user.uid}: {error.message}")
            message = error.message
        else:
            logger.error(f"{context} for user {self.user.uid}: {error}", exc_info=True)
            message = "An unexpected error occurred. Please try again."
        self.notifier.show(message, is_error=True)
        self._changed()

    # ------------------------------------------------------------------
    # Stream consumers
    # ------------------------------------------------------------------

    async def _consume_profile(self) -> None:
        try:
            async for profile in self.profile_store.observe_profile(self.user.uid):
                self.profile = profile
                self.profile_state = ProfileState.READY
                if not self.draft_dirty:
                    self.draft = profile
                if self.selected_day and self.selected_day not in profile.workout_plan:
                    self.selected_day = ""
                self.ready.set()
                self._changed()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.profile_state = ProfileState.ERROR
            self._fail(e, "Profile stream failed")

    async def _consume_workout_log(self) -> None:
        try:
            async for entries in self.log_store.observe_workout_log(self.user.uid):
                self.workout_log = entries
                self._changed()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(e, "Workout log stream failed")

    async def _consume_nutrition_log(self) -> None:
        try:
            async for entries in self.log_store.observe_nutrition_log(self.user.uid):
                self.nutrition_log = entries
                self._changed()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(e, "Nutrition log stream failed")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select_screen(self, screen) -> None:
        try:
            self.screen = Screen(screen)
        except ValueError:
            self._fail(ValidationError(f"Unknown screen '{screen}'."), "Navigation rejected")
            return
        self._changed()

    def select_workout_day(self, label: str) -> None:
        """Choose the day whose sets the workout form shows; clears nothing else."""
        if label and (self.profile is None or label not in self.profile.workout_plan):
            self._fail(ValidationError(f"Workout '{label}' is not in your plan."), "Day selection rejected")
            return
        self.selected_day = label or ""
        self._changed()

    # ------------------------------------------------------------------
    # Log actions
    # ------------------------------------------------------------------

    async def save_workout(self, form: Mapping[str, Any]) -> bool:
        try:
            if self.profile is None:
                raise ValidationError("Your plan is still loading.")
            entries = build_workout_entries(self.profile.workout_plan, self.selected_day, form, self.today())
            await self.log_store.add_workout_entries(self.user.uid, entries)
        except Exception as e:
            self._fail(e, "Saving workout failed")
            return False
        self.selected_day = ""
        self.notifier.show("Workout saved!")
        self._changed()
        return True

    async def add_food(self, form: Mapping[str, Any]) -> bool:
        try:
            entry = build_nutrition_entry(form, self.today())
            await self.log_store.add_nutrition_entry(self.user.uid, entry)
        except Exception as e:
            self._fail(e, "Adding food failed")
            return False
        self.notifier.show("Food added!")
        self._changed()
        return True

    async def remove_food(self, entry_id: str) -> bool:
        try:
            removed = await self.log_store.delete_nutrition_entry(self.user.uid, entry_id)
        except Exception as e:
            self._fail(e, "Removing food failed")
            return False
        if not removed:
            self._fail(ValidationError("That food entry no longer exists."), "Removing food failed")
            return False
        self.notifier.show("Food removed.")
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Settings draft
    # ------------------------------------------------------------------

    def _current_draft(self) -> UserProfile:
        if self.draft is None:
            raise ValidationError("Your plan is still loading.")
        return self.draft

    def edit_plan(self, operation: str, **arguments) -> bool:
        try:
            edit = plan_editor.EDIT_OPERATIONS.get(operation)
            if edit is None:
                raise ValidationError(f"Unknown plan edit '{operation}'.")
            try:
                self.draft = edit(self._current_draft(), **arguments)
            except TypeError as e:
                raise ValidationError(f"Invalid arguments for '{operation}'.") from e
        except Exception as e:
            self._fail(e, "Plan edit rejected")
            return False
        self.draft_dirty = True
        self._changed()
        return True

    def update_goals(self, **values) -> bool:
        try:
            self.draft = plan_editor.update_goals(self._current_draft(), **values)
        except Exception as e:
            self._fail(e, "Goal update rejected")
            return False
        self.draft_dirty = True
        self._changed()
        return True

    def reset_draft(self) -> None:
        self.draft = self.profile
        self.draft_dirty = False
        self._changed()

    async def save_settings(self) -> bool:
        """Write the draft as the new profile. The draft survives a failure."""
        try:
            await self.profile_store.save_profile(self.user.uid, self._current_draft())
        except Exception as e:
            self._fail(e, "Saving settings failed")
            return False
        self.draft_dirty = False
        self.notifier.show("Settings saved!")
        self._changed()
        return True

    async def generate_plan(self, request_text: str) -> bool:
        """Ask the AI for a plan and merge it into the draft.

        The result is dropped if the session ended or a newer request was made
        while this one was in flight. A partial plan is still applied, with a
        notice.
        """
        try:
            goals = self._current_draft().nutrition_goals
        except ValidationError as e:
            self._fail(e, "Plan generation rejected")
            return False

        self._generation += 1
        generation = self._generation
        self.generating = True
        self._changed()
        try:
            result = await self.plan_generator.generate(request_text, goals)
        except Exception as e:
            if self.active and generation == self._generation:
                self.generating = False
                self._fail(e, "Plan generation failed")
            return False

        if not self.active or generation != self._generation:
            logger.info(f"Discarding stale plan generation for user {self.user.uid}")
            return False

        self.generating = False
        self.draft = plan_editor.apply_generated_plan(self._current_draft(), result)
        self.draft_dirty = True
        if result.is_partial:
            self.notifier.show(
                f"The generated plan has only {len(result.workout_plan)} of "
                f"{result.warning.expected} days. Review it before saving.",
                is_error=True,
            )
        else:
            self.notifier.show("Plan generated! Review it and save.")
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> Dict[str, Any]:
        """View model of the active screen."""
        today = self.today()
        view: Dict[str, Any] = {
            "user": {"uid": self.user.uid, "email": self.user.email},
            "screen": self.screen.value,
            "screens": [screen.value for screen in Screen],
            "profile_state": self.profile_state.value,
            "notification": self.notifier.current.to_dict() if self.notifier.current else None,
            "today": today,
        }
        builders = {
            Screen.WORKOUT_ENTRY: self._render_workout_entry,
            Screen.NUTRITION_ENTRY: self._render_nutrition_entry,
            Screen.PLAN_VIEW: self._render_plan_view,
            Screen.HISTORY: self._render_history,
            Screen.SETTINGS: self._render_settings,
        }
        view["content"] = builders[self.screen](today)
        return view

    def _render_workout_entry(self, today: str) -> Dict[str, Any]:
        plan = self.profile.workout_plan if self.profile else {}
        exercises = []
        for ex_index, exercise in enumerate(plan.get(self.selected_day, [])):
            exercises.append({
                "index": ex_index,
                "name": exercise.name,
                "target_sets": exercise.target_sets,
                "target_reps": exercise.target_reps,
                "sets": [
                    {
                        "set_index": set_index + 1,
                        "weight_field": set_field_name(ex_index, set_index, "weight"),
                        "reps_field": set_field_name(ex_index, set_index, "reps"),
                    }
                    for set_index in range(exercise.target_sets)
                ],
            })
        return {"days": list(plan), "selected_day": self.selected_day, "exercises": exercises}

    def _render_nutrition_entry(self, today: str) -> Dict[str, Any]:
        items = log_aggregator.entries_for_day(self.nutrition_log, today)
        totals = log_aggregator.summarize_day(self.nutrition_log, today)
        goals = self.profile.nutrition_goals if self.profile else None
        return {
            "items": [item.model_dump() for item in items],
            "totals": totals.model_dump(),
            "goals": goals.model_dump() if goals else None,
            "progress": log_aggregator.goal_progress(totals, goals) if goals else None,
        }

    @staticmethod
    def _plan_days(profile: Optional[UserProfile]) -> List[Dict[str, Any]]:
        if profile is None:
            return []
        return [
            {"label": label, "exercises": [exercise.model_dump() for exercise in exercises]}
            for label, exercises in profile.workout_plan.items()
        ]

    def _render_plan_view(self, today: str) -> Dict[str, Any]:
        return {"days": self._plan_days(self.profile)}

    def _render_history(self, today: str) -> Dict[str, Any]:
        workouts = log_aggregator.group_workouts_by_date(self.workout_log)
        nutrition = log_aggregator.group_nutrition_by_date(self.nutrition_log)
        return {
            "workouts": [
                {
                    "date": day,
                    "display_date": log_aggregator.format_display_date(day),
                    "label": workouts[day].label,
                    "exercises": [
                        {
                            "name": name,
                            "sets": [
                                {"set_index": s.set_index, "weight": s.weight, "reps": s.reps}
                                for s in sets
                            ],
                        }
                        for name, sets in workouts[day].exercises.items()
                    ],
                }
                for day in log_aggregator.sort_dates_descending(workouts)
            ],
            "nutrition": [
                {
                    "date": day,
                    "display_date": log_aggregator.format_display_date(day),
                    "totals": nutrition[day].model_dump(),
                }
                for day in log_aggregator.sort_dates_descending(nutrition)
            ],
        }

    def _render_settings(self, today: str) -> Dict[str, Any]:
        return {
            "days": self._plan_days(self.draft),
            "goals": self.draft.nutrition_goals.model_dump() if self.draft else None,
            "dirty": self.draft_dirty,
            "generating": self.generating,
        }
