"""
Model catalog API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/models")
async def list_models() -> list[dict]:
    return await service.all_models()


@router.get("/models/{model_id}")
async def get_model(
    model_id: str,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict | None:
    return await service.model_by_id(model_id)


@router.get("/latest-models")
async def get_latest_models() -> list[dict]:
    """
    The six most recently created models, newest first.
    """
    return await service.latest_models()


@router.post("/models", response_model=schemas.InsertResult)
async def create_model(document: dict[str, Any] = Body(...)) -> dict:
    return await service.create_model(document)


@router.put("/models/{model_id}", response_model=schemas.UpdateResult)
async def update_model(model_id: str, fields: dict[str, Any] = Body(...)) -> dict:
    """
    Set the given fields on a model; fields not in the body are left alone.
    """
    return await service.update_model(model_id, fields)


@router.delete("/models/{model_id}", response_model=schemas.DeleteResult)
async def delete_model(model_id: str) -> dict:
    return await service.delete_model(model_id)


@router.get("/my-models")
async def get_my_models(
    email: str | None = Query(default=None),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> list[dict]:
    return await service.models_created_by(email)


@router.get("/search")
async def search_models(name: str | None = Query(default=None)) -> list[dict]:
    return await service.search_models(name)
