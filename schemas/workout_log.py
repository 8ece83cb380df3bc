"""Workout log collection schema."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class WorkoutLogEntry(BaseModel):
    """One lifted set. Immutable once written."""
    id: Optional[str] = Field(None, description="Document identifier assigned by the store")
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)")
    workout_day_label: str = Field(..., description="Plan day label at the time of logging")
    exercise_name: str = Field(..., description="Exercise name")
    set_index: int = Field(..., ge=1, description="1-based set number")
    weight: float = Field(..., description="Load used")
    reps: float = Field(..., description="Repetitions performed")
    created_at: Optional[int] = Field(None, description="Write timestamp in milliseconds")

    model_config = {"frozen": True}

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "WorkoutLogEntry":
        return cls(id=str(document["_id"]), **{k: v for k, v in document.items() if k not in ("_id", "id", "user_id")})

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})
