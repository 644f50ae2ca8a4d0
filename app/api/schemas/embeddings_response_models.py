"""Response models for embedding API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.services.embedding_backfill_service import BackfillItemResult


class BackfillResponse(BaseModel):
    """Per-item outcome of a backfill pass."""

    success: Literal[True] = True
    results: list[BackfillItemResult] = Field(default_factory=list)


class BackfillErrorResponse(BaseModel):
    """Returned when the work list could not be fetched."""

    success: Literal[False] = False
    error: str
