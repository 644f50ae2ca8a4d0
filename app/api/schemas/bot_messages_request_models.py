"""Request models for bot message API endpoints."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class BotMessageRequest(BaseModel):
    """Request model for a bot reply."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "content": "When is the quarterly planning meeting?",
                    "conversationId": "0b6f1c1e-4f7e-4c55-9d7a-3f0d2f6a9c11",
                    "senderId": "7d2b9a3e-8c41-4f0b-a2d5-1e6c9b8f4a20",
                }
            ]
        },
    )

    content: str = Field(..., description="The user's chat message")
    conversation_id: uuid.UUID = Field(
        ..., alias="conversationId", description="Conversation the reply is posted to"
    )
    sender_id: uuid.UUID = Field(
        ..., alias="senderId", description="User who sent the message"
    )
