"""Nutrition log collection schema."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


def calories_from_macros(protein_grams: float, carb_grams: float, fat_grams: float) -> float:
    """Energy of a food item: 4 kcal/g protein and carbs, 9 kcal/g fat."""
    return protein_grams * 4 + carb_grams * 4 + fat_grams * 9


class NutritionLogEntry(BaseModel):
    """One logged food item. Deletable, otherwise immutable."""
    id: Optional[str] = Field(None, description="Document identifier assigned by the store")
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)")
    food_name: str = Field(..., description="Name of the food")
    protein_grams: float = Field(0.0, ge=0, description="Protein in grams")
    carb_grams: float = Field(0.0, ge=0, description="Carbohydrates in grams")
    fat_grams: float = Field(0.0, ge=0, description="Fat in grams")
    calories: float = Field(0.0, ge=0, description="Calories derived from the macros")
    created_at: Optional[int] = Field(None, description="Write timestamp in milliseconds")

    model_config = {"frozen": True}

    @classmethod
    def create(
        cls,
        date: str,
        food_name: str,
        protein_grams: float,
        carb_grams: float,
        fat_grams: float,
    ) -> "NutritionLogEntry":
        """New entry with calories computed from the macros."""
        return cls(
            date=date,
            food_name=food_name,
            protein_grams=protein_grams,
            carb_grams=carb_grams,
            fat_grams=fat_grams,
            calories=calories_from_macros(protein_grams, carb_grams, fat_grams),
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "NutritionLogEntry":
        return cls(id=str(document["_id"]), **{k: v for k, v in document.items() if k not in ("_id", "id", "user_id")})

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})


class NutritionTotals(BaseModel):
    """Summed calories and macros for a set of entries."""
    calories: float = 0.0
    protein_grams: float = 0.0
    carb_grams: float = 0.0
    fat_grams: float = 0.0

    def add(self, entry: NutritionLogEntry) -> "NutritionTotals":
        """Return new totals including ``entry``."""
        return NutritionTotals(
            calories=self.calories + entry.calories,
            protein_grams=self.protein_grams + entry.protein_grams,
            carb_grams=self.carb_grams + entry.carb_grams,
            fat_grams=self.fat_grams + entry.fat_grams,
        )
