"""
Download API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel

from models.schemas import InsertResult, UpdateResult


class DownloadRecorded(BaseModel):
    result: InsertResult
    downloadCounted: UpdateResult
