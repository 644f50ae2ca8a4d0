"""Typed rows exchanged with the content store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field


class ContentType(StrEnum):
    """Content categories eligible for embedding."""

    POST = "post"
    MESSAGE = "message"
    POST_THREAD_COMMENT = "post_thread_comment"
    CONVERSATION_THREAD_COMMENT = "conversation_thread_comment"


# Column on vector_embeddings that references each content category.
FOREIGN_KEY_BY_CONTENT_TYPE: Final[dict[ContentType, str]] = {
    ContentType.POST: "post_id",
    ContentType.MESSAGE: "message_id",
    ContentType.POST_THREAD_COMMENT: "post_thread_comment_id",
    ContentType.CONVERSATION_THREAD_COMMENT: "conversation_thread_comment_id",
}


class ContentItem(BaseModel):
    """A row that has no embedding yet, tagged with its category."""

    id: uuid.UUID
    content: str | None = None
    type: ContentType


class EmbeddingRecord(BaseModel):
    """A vector_embeddings row ready for insertion."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    embedding: list[float]
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    post_id: uuid.UUID | None = None
    message_id: uuid.UUID | None = None
    post_thread_comment_id: uuid.UUID | None = None
    conversation_thread_comment_id: uuid.UUID | None = None

    @classmethod
    def for_item(cls, item: ContentItem, embedding: list[float]) -> EmbeddingRecord:
        """Build a record with the foreign key matching the item's category set."""
        return cls.model_validate(
            {"embedding": embedding, FOREIGN_KEY_BY_CONTENT_TYPE[item.type]: item.id}
        )


class UserLanguagePreference(BaseModel):
    native_language: str | None = None
    language: str | None = None


class SimilarityResult(BaseModel):
    """One ranked row returned by match_all_content."""

    content_id: uuid.UUID
    content_type: str
    channel_id: uuid.UUID | None = None
    conversation_id: uuid.UUID | None = None
    parent_id: uuid.UUID | None = None
    display_name: str
    created_at: datetime
    content: str
    similarity: float

    @property
    def is_thread_reply(self) -> bool:
        if self.channel_id is not None:
            return self.content_type == "post_thread"
        if self.conversation_id is not None:
            return self.content_type == "dm_thread"
        return False


class BotMessage(BaseModel):
    """A persisted message row."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    conversation_id: uuid.UUID
    sender_id: uuid.UUID
    created_at: datetime
