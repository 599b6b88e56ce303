"""
Model catalog business logic.

Every operation is a single store call; results are returned as the store
produced them. Missing documents are not an error.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from fastapi import HTTPException, status

from core import db

from . import repository

LATEST_MODELS_LIMIT = 6


def parse_model_id(model_id: str) -> ObjectId:
    try:
        return db.object_id(model_id)
    except db.InvalidDocumentId as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid model id.",
        ) from exc


async def all_models() -> list[dict]:
    return await repository.list_models()


async def model_by_id(model_id: str) -> dict | None:
    return await repository.get_model(parse_model_id(model_id))


async def latest_models() -> list[dict]:
    return await repository.list_latest_models(limit=LATEST_MODELS_LIMIT)


async def create_model(document: dict[str, Any]) -> dict:
    return await repository.insert_model(document)


async def update_model(model_id: str, fields: dict[str, Any]) -> dict:
    return await repository.update_model(parse_model_id(model_id), fields)


async def delete_model(model_id: str) -> dict:
    return await repository.delete_model(parse_model_id(model_id))


async def models_created_by(email: str | None) -> list[dict]:
    # The filter is whatever the caller asked for, not the verified identity.
    return await repository.list_models_by_creator(email)


async def search_models(name: str | None) -> list[dict]:
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required",
        )
    return await repository.search_models_by_name(name)
