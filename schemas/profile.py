"""Profile collection schema."""

from typing import Any, Dict, List
from pydantic import BaseModel, Field
from config.defaults import DEFAULT_NUTRITION_GOALS, DEFAULT_WORKOUT_PLAN


class Exercise(BaseModel):
    """One exercise of a training day."""
    name: str = Field(..., description="Exercise label")
    target_sets: int = Field(..., ge=1, description="Number of sets to perform")
    target_reps: str = Field(..., description="Repetition range, e.g. 8-12")


# Day label -> ordered exercises; dict order is display order
WorkoutPlan = Dict[str, List[Exercise]]


class NutritionGoals(BaseModel):
    """Daily nutrition targets."""
    calories: float = Field(0.0, ge=0, description="Daily calories (kcal)")
    protein_grams: float = Field(0.0, ge=0, description="Daily protein in grams")
    carb_grams: float = Field(0.0, ge=0, description="Daily carbohydrates in grams")
    fat_grams: float = Field(0.0, ge=0, description="Daily fat in grams")


class UserProfile(BaseModel):
    """Profile document: workout plan plus nutrition goals, one per user."""
    workout_plan: WorkoutPlan = Field(default_factory=dict, description="Training plan by day label")
    nutrition_goals: NutritionGoals = Field(default_factory=NutritionGoals, description="Daily nutrition goals")

    @classmethod
    def default(cls) -> "UserProfile":
        """Profile created for a user on first access."""
        return cls(
            workout_plan=DEFAULT_WORKOUT_PLAN,
            nutrition_goals=NutritionGoals(**DEFAULT_NUTRITION_GOALS),
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserProfile":
        """Build a profile from a stored document, ignoring storage keys."""
        data = {k: v for k, v in document.items() if not k.startswith("_")}
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for a whole-document write."""
        return self.model_dump()
