"""
Shared fixtures: an in-memory document store, a fake token verifier and a
TestClient wired to both.
"""

from __future__ import annotations

import copy
import re
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from auth.security import AuthSecurityError
from core import db
from main import app

VALID_TOKEN = "valid-token"
TEST_CLAIMS = {"sub": "user-1", "uid": "user-1", "email": "owner@example.com"}


def _matches(doc: dict[str, Any], filter: dict[str, Any]) -> bool:
    for key, cond in filter.items():
        value = doc.get(key)
        if isinstance(cond, dict) and "$regex" in cond:
            flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
            if not isinstance(value, str) or not re.search(cond["$regex"], value, flags):
                return False
        elif value != cond:
            return False
    return True


class FakeStore:
    """In-memory DocumentStore supporting the operators the API uses."""

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.closed = False

    def _docs(self, collection: str) -> list[dict[str, Any]]:
        return self.collections.setdefault(collection, [])

    async def find(self, collection, filter, *, sort=None, limit=0):
        docs = [d for d in self._docs(collection) if _matches(d, filter)]
        for key, direction in reversed(sort or []):
            docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def find_one(self, collection, filter):
        docs = await self.find(collection, filter, limit=1)
        return docs[0] if docs else None

    async def insert_one(self, collection, document):
        doc = copy.deepcopy(document)
        doc.setdefault("_id", ObjectId())
        self._docs(collection).append(doc)
        return {"acknowledged": True, "insertedId": doc["_id"]}

    async def update_one(self, collection, filter, update):
        for doc in self._docs(collection):
            if not _matches(doc, filter):
                continue
            before = copy.deepcopy(doc)
            doc.update(update.get("$set", {}))
            for key, amount in update.get("$inc", {}).items():
                doc[key] = doc.get(key, 0) + amount
            return {
                "acknowledged": True,
                "matchedCount": 1,
                "modifiedCount": int(doc != before),
                "upsertedCount": 0,
                "upsertedId": None,
            }
        return {
            "acknowledged": True,
            "matchedCount": 0,
            "modifiedCount": 0,
            "upsertedCount": 0,
            "upsertedId": None,
        }

    async def delete_one(self, collection, filter):
        docs = self._docs(collection)
        for i, doc in enumerate(docs):
            if _matches(doc, filter):
                del docs[i]
                return {"acknowledged": True, "deletedCount": 1}
        return {"acknowledged": True, "deletedCount": 0}

    async def ping(self):
        return None

    async def close(self):
        self.closed = True


class FakeVerifier:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def verify(self, token: str) -> dict[str, Any]:
        self.calls.append(token)
        if token != VALID_TOKEN:
            raise AuthSecurityError("bad token")
        return dict(TEST_CLAIMS)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def client(store: FakeStore, verifier: FakeVerifier):
    db.set_store(store)
    app.dependency_overrides[auth_dependencies.get_token_verifier] = lambda: verifier
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        db.set_store(None)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {VALID_TOKEN}"}
