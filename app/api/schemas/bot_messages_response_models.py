"""Response models for bot message API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.db.schemas import BotMessage

BOT_MESSAGE_FAILED = "Failed to process bot message"


class BotMessageResponse(BaseModel):
    """Response model for a posted bot reply."""

    success: Literal[True] = True
    message: BotMessage


class BotMessageErrorResponse(BaseModel):
    """Opaque failure returned when any step of the reply fails."""

    error: str = Field(default=BOT_MESSAGE_FAILED, examples=[BOT_MESSAGE_FAILED])
