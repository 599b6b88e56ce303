"""
Model collection persistence.
"""

from __future__ import annotations

import re
from typing import Any

from bson import ObjectId

from core import db

COLLECTION = "models"


def _by_id(model_id: ObjectId) -> dict[str, Any]:
    return {"_id": model_id}


async def list_models() -> list[dict]:
    return await db.find_all(COLLECTION)


async def get_model(model_id: ObjectId) -> dict | None:
    return await db.find_one(COLLECTION, _by_id(model_id))


async def list_latest_models(*, limit: int) -> list[dict]:
    return await db.find_all(COLLECTION, sort=[("created_at", -1)], limit=limit)


async def insert_model(document: dict[str, Any]) -> dict:
    return await db.insert_one(COLLECTION, document)


async def update_model(model_id: ObjectId, fields: dict[str, Any]) -> dict:
    return await db.update_one(COLLECTION, _by_id(model_id), {"$set": fields})


async def delete_model(model_id: ObjectId) -> dict:
    return await db.delete_one(COLLECTION, _by_id(model_id))


async def list_models_by_creator(created_by: str | None) -> list[dict]:
    return await db.find_all(COLLECTION, {"created_by": created_by})


async def search_models_by_name(text: str) -> list[dict]:
    """
    Case-insensitive substring match on `name`.
    """
    return await db.find_all(
        COLLECTION,
        {"name": {"$regex": re.escape(text), "$options": "i"}},
    )


async def increment_downloads(model_id: ObjectId) -> dict:
    return await db.update_one(COLLECTION, _by_id(model_id), {"$inc": {"downloads": 1}})
