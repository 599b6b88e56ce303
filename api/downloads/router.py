"""
FastAPI router for download endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Query

from . import schemas, service

router = APIRouter()


@router.post("/downloads/{model_id}", response_model=schemas.DownloadRecorded)
async def record_download(model_id: str, payload: dict[str, Any] = Body(...)) -> dict:
    """
    Store a download record for a model and increment the model's counter.
    """
    return await service.record_download(model_id, payload)


@router.get("/my-downloads")
async def get_my_downloads(email: str | None = Query(default=None)) -> list[dict]:
    return await service.downloads_by_user(email)
