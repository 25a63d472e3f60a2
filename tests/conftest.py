"""
Shared fixtures.

Services take their database as a constructor argument, so tests hand them
an in-memory stand-in for the handful of collection methods they call.
"""

import copy
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from coaching_core.api_gateway.main import app
from coaching_core.shared_services.database import get_platform_db


def _matches(document: dict, query: dict) -> bool:
    for key, expected in query.items():
        if isinstance(expected, dict) and "$in" in expected:
            if document.get(key) not in expected["$in"]:
                return False
        elif document.get(key) != expected:
            return False
    return True


class InMemoryCursor:
    def __init__(self, documents: list[dict]):
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "InMemoryCursor":
        self._documents.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def __aiter__(self):
        self._iter = iter(self._documents)
        return self

    async def __anext__(self) -> dict:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class InMemoryCollection:
    def __init__(self, name: str, unique_keys: Optional[list[tuple[str, ...]]] = None):
        self.name = name
        self.unique_keys = unique_keys or []
        self.documents: list[dict] = []
        self.indexes: list[Any] = []

    async def create_indexes(self, indexes: list[Any]) -> list[str]:
        self.indexes.extend(indexes)
        return [str(i) for i in range(len(indexes))]

    def _check_unique(self, candidate: dict, ignore: Optional[dict] = None) -> None:
        for fields in self.unique_keys:
            values = tuple(candidate.get(f) for f in fields)
            if any(v is None for v in values):
                continue
            for existing in self.documents:
                if existing is ignore:
                    continue
                if tuple(existing.get(f) for f in fields) == values:
                    index_name = "_".join(f"{f}_1" for f in fields)
                    key_value = dict(zip(fields, values))
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name} "
                        f"index: {index_name} dup key: {key_value}",
                        code=11000,
                        details={
                            "code": 11000,
                            "keyPattern": {f: 1 for f in fields},
                            "keyValue": key_value,
                        },
                    )

    async def insert_one(self, document: dict) -> SimpleNamespace:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self._check_unique(stored)
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def find_one(self, query: dict) -> Optional[dict]:
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: dict) -> InMemoryCursor:
        return InMemoryCursor([copy.deepcopy(d) for d in self.documents if _matches(d, query)])

    async def replace_one(self, query: dict, replacement: dict) -> SimpleNamespace:
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                stored = copy.deepcopy(replacement)
                stored["_id"] = document["_id"]
                self._check_unique(stored, ignore=document)
                self.documents[index] = stored
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict) -> SimpleNamespace:
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def update_one(self, query: dict, update: dict) -> SimpleNamespace:
        for document in self.documents:
            if _matches(document, query):
                modified = 0
                for field, value in update.get("$addToSet", {}).items():
                    values = document.setdefault(field, [])
                    if value not in values:
                        values.append(value)
                        modified = 1
                return SimpleNamespace(matched_count=1, modified_count=modified)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(
        self,
        query: dict,
        update: dict,
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> Optional[dict]:
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)

        if not upsert:
            return None

        created = {**query, **update.get("$setOnInsert", {})}
        await self.insert_one(created)
        if return_document == ReturnDocument.AFTER:
            return await self.find_one(query)
        return None


class InMemoryDatabase:
    name = "coaching_platform_test"

    def __init__(self):
        self.collections = {
            "institutes": InMemoryCollection(
                "institutes", [("institute_id",), ("api_key",), ("admin_email",)]
            ),
            "batches": InMemoryCollection("batches", [("batch_id",)]),
            "users": InMemoryCollection("users", [("user_id",), ("institute_id", "phone_number")]),
        }

    def __getitem__(self, name: str) -> InMemoryCollection:
        return self.collections.setdefault(name, InMemoryCollection(name))


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def client(db: InMemoryDatabase):
    app.dependency_overrides[get_platform_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()
