"""
Async document store access using pymongo's AsyncMongoClient.

This module owns the store handle. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

Filter/update documents use MongoDB operator syntax:
- filters: {"field": value}, {"name": {"$regex": "...", "$options": "i"}}
- updates: {"$set": {...}}, {"$inc": {"downloads": 1}}
"""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol
from urllib.parse import quote_plus

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient
from pymongo.server_api import ServerApi

Document = dict[str, Any]
SortSpec = list[tuple[str, int]]

logger = logging.getLogger(__name__)


class InvalidDocumentId(ValueError):
    pass


class DocumentStore(Protocol):
    async def find(
        self,
        collection: str,
        filter: Document,
        *,
        sort: SortSpec | None = None,
        limit: int = 0,
    ) -> list[Document]: ...

    async def find_one(self, collection: str, filter: Document) -> Document | None: ...

    async def insert_one(self, collection: str, document: Document) -> Document: ...

    async def update_one(self, collection: str, filter: Document, update: Document) -> Document: ...

    async def delete_one(self, collection: str, filter: Document) -> Document: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...


def _env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise RuntimeError(f"{name} is not set.")
    return value


def mongodb_uri() -> str:
    uri = os.environ.get("MONGODB_URI", "").strip()
    if uri:
        return uri

    user = quote_plus(_env("DB_USER"))
    password = quote_plus(_env("DB_PASS"))
    cluster = _env("DB_CLUSTER")
    return f"mongodb+srv://{user}:{password}@{cluster}/?retryWrites=true&w=majority"


def database_name() -> str:
    return _env("DB_NAME")


class MongoStore:
    """
    DocumentStore backed by a single shared AsyncMongoClient.
    """

    def __init__(self, client: AsyncMongoClient, database: str) -> None:
        self._client = client
        self._db = client[database]

    @classmethod
    def from_uri(cls, uri: str, database: str) -> MongoStore:
        client: AsyncMongoClient = AsyncMongoClient(
            uri,
            server_api=ServerApi("1", strict=True, deprecation_errors=True),
        )
        return cls(client, database)

    @property
    def database(self) -> str:
        return self._db.name

    async def find(
        self,
        collection: str,
        filter: Document,
        *,
        sort: SortSpec | None = None,
        limit: int = 0,
    ) -> list[Document]:
        cursor = self._db[collection].find(filter)
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(None)

    async def find_one(self, collection: str, filter: Document) -> Document | None:
        return await self._db[collection].find_one(filter)

    async def insert_one(self, collection: str, document: Document) -> Document:
        # insert_one() writes the generated _id into the dict it is given.
        res = await self._db[collection].insert_one(dict(document))
        return {"acknowledged": res.acknowledged, "insertedId": res.inserted_id}

    async def update_one(self, collection: str, filter: Document, update: Document) -> Document:
        res = await self._db[collection].update_one(filter, update)
        return {
            "acknowledged": res.acknowledged,
            "matchedCount": res.matched_count,
            "modifiedCount": res.modified_count,
            "upsertedCount": 1 if res.upserted_id is not None else 0,
            "upsertedId": res.upserted_id,
        }

    async def delete_one(self, collection: str, filter: Document) -> Document:
        res = await self._db[collection].delete_one(filter)
        return {"acknowledged": res.acknowledged, "deletedCount": res.deleted_count}

    async def ping(self) -> None:
        await self._client.admin.command("ping")

    async def close(self) -> None:
        await self._client.close()


_store: DocumentStore | None = None


async def init_store() -> None:
    global _store
    if _store is not None:
        return None
    mongo = MongoStore.from_uri(mongodb_uri(), database_name())
    _store = mongo
    logger.info("store_initialized database=%s", mongo.database)


async def close_store() -> None:
    global _store
    if _store is None:
        return None
    await _store.close()
    _store = None


def set_store(new_store: DocumentStore | None) -> None:
    """
    Install a store implementation (or clear it with None).
    """
    global _store
    _store = new_store


def store() -> DocumentStore:
    if _store is None:
        raise RuntimeError("Document store is not initialized. Call init_store() on startup.")
    return _store


def object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise InvalidDocumentId(f"Invalid document id: {value!r}") from exc


def to_jsonable(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_jsonable(v) for v in value]
    return value


async def find_all(
    collection: str,
    filter: Document | None = None,
    *,
    sort: SortSpec | None = None,
    limit: int = 0,
) -> list[Document]:
    """
    Run a query and return every matching document.
    """
    docs = await store().find(collection, filter or {}, sort=sort, limit=limit)
    return [to_jsonable(d) for d in docs]


async def find_one(collection: str, filter: Document) -> Document | None:
    doc = await store().find_one(collection, filter)
    return to_jsonable(doc) if doc is not None else None


async def insert_one(collection: str, document: Document) -> Document:
    return to_jsonable(await store().insert_one(collection, document))


async def update_one(collection: str, filter: Document, update: Document) -> Document:
    return to_jsonable(await store().update_one(collection, filter, update))


async def delete_one(collection: str, filter: Document) -> Document:
    return to_jsonable(await store().delete_one(collection, filter))


async def ping() -> None:
    await store().ping()
