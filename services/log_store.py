"""Workout and nutrition log persistence, scoped per user."""

from contextlib import aclosing
from typing import AsyncIterator, List

from models.database import NUTRITION_LOG_COLLECTION, WORKOUT_LOG_COLLECTION
from schemas.nutrition_log import NutritionLogEntry
from schemas.workout_log import WorkoutLogEntry
from utils.helpers import monotonic_timestamp_ms
from utils.logger import setup_logger

logger = setup_logger(__name__)


class LogStoreAdapter:
    """Append/delete access to a user's log collections plus live snapshots.

    Every query and delete is filtered by ``user_id``; entries are never
    updated in place.
    """

    def __init__(self, store):
        self.store = store

    async def add_workout_entries(self, user_id: str, entries: List[WorkoutLogEntry]) -> List[str]:
        """Store each set as its own document. Returns the new ids."""
        ids = []
        for entry in entries:
            document = {
                **entry.to_document(),
                "user_id": user_id,
                "created_at": monotonic_timestamp_ms(),
            }
            ids.append(await self.store.add_document(WORKOUT_LOG_COLLECTION, document))
        logger.info(f"Saved {len(ids)} workout set(s) for user {user_id}")
        return ids

    async def add_nutrition_entry(self, user_id: str, entry: NutritionLogEntry) -> str:
        """Store a food entry. Calories are recomputed from the macros."""
        fresh = NutritionLogEntry.create(
            date=entry.date,
            food_name=entry.food_name,
            protein_grams=entry.protein_grams,
            carb_grams=entry.carb_grams,
            fat_grams=entry.fat_grams,
        )
        document = {
            **fresh.to_document(),
            "user_id": user_id,
            "created_at": monotonic_timestamp_ms(),
        }
        entry_id = await self.store.add_document(NUTRITION_LOG_COLLECTION, document)
        logger.info(f"Saved nutrition entry {entry_id} for user {user_id}")
        return entry_id

    async def delete_nutrition_entry(self, user_id: str, entry_id: str) -> bool:
        """Delete one of the user's food entries. Returns whether it existed."""
        deleted = await self.store.delete_document(
            NUTRITION_LOG_COLLECTION, entry_id, {"user_id": user_id}
        )
        if not deleted:
            logger.warning(f"Nutrition entry {entry_id} not found for user {user_id}")
        return deleted

    async def observe_workout_log(self, user_id: str) -> AsyncIterator[List[WorkoutLogEntry]]:
        """Workout log snapshots, newest first."""
        async with aclosing(self.store.watch_query(
            WORKOUT_LOG_COLLECTION, {"user_id": user_id}, "created_at", descending=True
        )) as snapshots:
            async for documents in snapshots:
                yield [WorkoutLogEntry.from_document(doc) for doc in documents]

    async def observe_nutrition_log(self, user_id: str) -> AsyncIterator[List[NutritionLogEntry]]:
        """Nutrition log snapshots, newest first."""
        async with aclosing(self.store.watch_query(
            NUTRITION_LOG_COLLECTION, {"user_id": user_id}, "created_at", descending=True
        )) as snapshots:
            async for documents in snapshots:
                yield [NutritionLogEntry.from_document(doc) for doc in documents]
