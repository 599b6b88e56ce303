"""
Pydantic schemas for store write results.

Field names follow the JSON shape MongoDB drivers serialize results to.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class InsertResult(BaseModel):
    acknowledged: bool
    insertedId: Any = None


class UpdateResult(BaseModel):
    acknowledged: bool
    matchedCount: int = 0
    modifiedCount: int = 0
    upsertedCount: int = 0
    upsertedId: Any = None


class DeleteResult(BaseModel):
    acknowledged: bool
    deletedCount: int = 0
