"""
Download record persistence.
"""

from __future__ import annotations

from typing import Any

from core import db

COLLECTION = "downloads"


async def insert_download(record: dict[str, Any]) -> dict:
    return await db.insert_one(COLLECTION, record)


async def list_downloads_by_user(downloaded_by: str | None) -> list[dict]:
    return await db.find_all(COLLECTION, {"downloaded_by": downloaded_by})
