"""Shared fixtures: an in-memory document store and a few builders."""

import asyncio
import copy
import uuid
from collections import defaultdict
from typing import Any, Callable, Dict, List

import pytest

from schemas.auth import AuthUser
from schemas.profile import Exercise, NutritionGoals, UserProfile
from services.plan_normalizer import NormalizedPlan
from utils.errors import ReadError, WriteError


class FakeDocumentStore:
    """In-memory stand-in for ``models.document_store.DocumentStore``.

    Same method surface; watchers are woken through queues on every write to
    a matching document.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self.fail_reads = False
        self.fail_writes = False
        self.create_calls = 0
        self._watchers: List[tuple] = []

    def _check_read(self):
        if self.fail_reads:
            raise ReadError("Could not read data. Please try again.")

    def _check_write(self):
        if self.fail_writes:
            raise WriteError("Could not save data. Please try again.")

    def _notify(self, collection: str, document: Dict[str, Any]) -> None:
        for watched, predicate, queue in list(self._watchers):
            if watched == collection and predicate(document):
                queue.put_nowait(True)

    async def get_document(self, collection, doc_id):
        await asyncio.sleep(0)
        self._check_read()
        document = self.collections[collection].get(doc_id)
        return copy.deepcopy(document)

    async def create_if_absent(self, collection, doc_id, data):
        self.create_calls += 1
        await asyncio.sleep(0)
        self._check_write()
        if doc_id in self.collections[collection]:
            return False
        document = {"_id": doc_id, **copy.deepcopy(data)}
        self.collections[collection][doc_id] = document
        self._notify(collection, document)
        return True

    async def replace_document(self, collection, doc_id, data):
        await asyncio.sleep(0)
        self._check_write()
        document = {"_id": doc_id, **copy.deepcopy(data)}
        self.collections[collection][doc_id] = document
        self._notify(collection, document)

    async def add_document(self, collection, data):
        await asyncio.sleep(0)
        self._check_write()
        doc_id = uuid.uuid4().hex
        document = {"_id": doc_id, **copy.deepcopy(data)}
        self.collections[collection][doc_id] = document
        self._notify(collection, document)
        return doc_id

    async def delete_document(self, collection, doc_id, owner):
        await asyncio.sleep(0)
        self._check_write()
        document = self.collections[collection].get(doc_id)
        if document is None or any(document.get(k) != v for k, v in owner.items()):
            return False
        del self.collections[collection][doc_id]
        self._notify(collection, document)
        return True

    async def find_documents(self, collection, query, sort_field, descending=True):
        await asyncio.sleep(0)
        self._check_read()
        matches = [
            copy.deepcopy(doc) for doc in self.collections[collection].values()
            if all(doc.get(k) == v for k, v in query.items())
        ]
        return sorted(matches, key=lambda doc: doc.get(sort_field, 0), reverse=descending)

    async def watch_document(self, collection, doc_id):
        queue: asyncio.Queue = asyncio.Queue()
        watcher = (collection, lambda doc: doc.get("_id") == doc_id, queue)
        self._watchers.append(watcher)
        try:
            yield await self.get_document(collection, doc_id)
            while True:
                await queue.get()
                yield await self.get_document(collection, doc_id)
        finally:
            self._watchers.remove(watcher)

    async def watch_query(self, collection, query, sort_field, descending=True):
        queue: asyncio.Queue = asyncio.Queue()
        watcher = (collection, lambda doc: all(doc.get(k) == v for k, v in query.items()), queue)
        self._watchers.append(watcher)
        try:
            yield await self.find_documents(collection, query, sort_field, descending)
            while True:
                await queue.get()
                yield await self.find_documents(collection, query, sort_field, descending)
        finally:
            self._watchers.remove(watcher)

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def user():
    return AuthUser(uid="user-1", email="athlete@example.com")


@pytest.fixture
def two_day_profile():
    return UserProfile(
        workout_plan={
            "Push": [
                Exercise(name="Bench Press", target_sets=4, target_reps="6-10"),
                Exercise(name="Overhead Press", target_sets=3, target_reps="8-12"),
            ],
            "Pull": [
                Exercise(name="Barbell Row", target_sets=3, target_reps="8-10"),
            ],
        },
        nutrition_goals=NutritionGoals(calories=2500, protein_grams=150, carb_grams=300, fat_grams=70),
    )


@pytest.fixture
def generated_plan_payload():
    """Well-formed AI answer with six days."""
    return {
        "nutritionGoals": {"calories": 2800, "proteinGrams": 170, "carbGrams": 350, "fatGrams": 80},
        "workoutPlan": [
            {
                "dayName": f"Day {n}",
                "exercises": [{"exercicio": f"Exercise {n}", "series": 3, "reps": "8-12"}],
            }
            for n in range(1, 7)
        ],
    }


@pytest.fixture
def normalized_plan():
    return NormalizedPlan(
        workout_plan={"Full Body": [Exercise(name="Squat", target_sets=5, target_reps="5")]},
        nutrition_goals=NutritionGoals(calories=2000, protein_grams=140, carb_grams=200, fat_grams=60),
    )


@pytest.fixture
def wait_for():
    """Poll a condition until it holds, yielding to the event loop."""

    async def _wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait_for
