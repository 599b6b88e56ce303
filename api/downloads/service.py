"""
Download recording.

A download is two independent writes: insert the record, then bump the
model's `downloads` counter. There is no transaction around them and no
check that the model exists, so the counter can drift from the number of
records if the second write fails or requests interleave.
"""

from __future__ import annotations

import logging
from typing import Any

from models import repository as model_repository
from models import service as model_service

from . import repository

logger = logging.getLogger(__name__)


async def record_download(model_id: str, payload: dict[str, Any]) -> dict:
    oid = model_service.parse_model_id(model_id)

    record = dict(payload)
    record.setdefault("model_id", model_id)

    result = await repository.insert_download(record)
    download_counted = await model_repository.increment_downloads(oid)

    logger.info(
        "download_recorded model_id=%s matched=%s",
        model_id,
        download_counted.get("matchedCount"),
    )
    return {"result": result, "downloadCounted": download_counted}


async def downloads_by_user(email: str | None) -> list[dict]:
    return await repository.list_downloads_by_user(email)
