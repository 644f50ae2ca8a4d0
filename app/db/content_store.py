"""Content store: the database reads and writes behind both handlers."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Final, TypeVar

from pgvector.sqlalchemy import Vector
from pydantic import BaseModel, ValidationError
from sqlalchemy import bindparam, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import EMBEDDING_DIMENSIONS, Message, TopLanguage, User, VectorEmbedding
from app.db.schemas import (
    BotMessage,
    ContentItem,
    ContentType,
    EmbeddingRecord,
    SimilarityResult,
    UserLanguagePreference,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Database functions returning (id, content) rows that have no embedding yet.
MISSING_EMBEDDINGS_FUNCTION_BY_CONTENT_TYPE: Final[dict[ContentType, str]] = {
    ContentType.POST: "posts_without_embeddings",
    ContentType.MESSAGE: "messages_without_embeddings",
    ContentType.POST_THREAD_COMMENT: "post_thread_comments_without_embeddings",
    ContentType.CONVERSATION_THREAD_COMMENT: "conversation_thread_comments_without_embeddings",
}

_MATCH_ALL_CONTENT = text(
    "SELECT * FROM match_all_content("
    ":query_embedding, :match_threshold, :match_count, :p_user_id)"
).bindparams(bindparam("query_embedding", type_=Vector(EMBEDDING_DIMENSIONS)))


class ContentStoreError(Exception):
    """Base error raised when the content store cannot fulfill a request."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class ContentFetchError(ContentStoreError):
    """Listing content without embeddings failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "content_fetch_failed")


class UserNotFoundError(ContentStoreError):
    """No user exists with the requested id."""

    def __init__(self, user_id: uuid.UUID) -> None:
        super().__init__(f"User {user_id} not found", "user_not_found")


class StoreDecodeError(ContentStoreError):
    """A row returned by the database did not have the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "store_decode_failed")


class ContentStore(ABC):
    """Abstract base class for content stores."""

    @abstractmethod
    async def fetch_items_without_embeddings(self, content_type: ContentType) -> list[ContentItem]:
        """Return rows of one category that have no embedding yet."""
        raise NotImplementedError

    @abstractmethod
    async def insert_embedding(self, record: EmbeddingRecord) -> None:
        """Persist and commit one embedding record."""
        raise NotImplementedError

    @abstractmethod
    async def get_user_language(self, user_id: uuid.UUID) -> UserLanguagePreference:
        """Return the user's language preference or raise UserNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    async def match_all_content(
        self,
        query_embedding: list[float],
        match_threshold: float,
        match_count: int,
        user_id: uuid.UUID,
    ) -> list[SimilarityResult]:
        """Return content visible to the user ranked by similarity to the embedding."""
        raise NotImplementedError

    @abstractmethod
    async def insert_message(
        self, content: str, conversation_id: uuid.UUID, sender_id: uuid.UUID
    ) -> BotMessage:
        """Persist a message and return the stored row."""
        raise NotImplementedError


def _decode_rows(model: type[M], rows: list[Mapping[str, Any]], **extra: Any) -> list[M]:
    try:
        return [model.model_validate({**row, **extra}) for row in rows]
    except ValidationError as e:
        raise StoreDecodeError(f"Unexpected {model.__name__} row: {e}") from e


class SQLAlchemyContentStore(ContentStore):
    """Content store backed by the request's AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_items_without_embeddings(self, content_type: ContentType) -> list[ContentItem]:
        function_name = MISSING_EMBEDDINGS_FUNCTION_BY_CONTENT_TYPE[content_type]
        try:
            result = await self._session.execute(
                text(f"SELECT id, content FROM {function_name}()")
            )
        except SQLAlchemyError as e:
            raise ContentFetchError(f"Error fetching {content_type} rows: {e}") from e
        rows = list(result.mappings().all())
        return _decode_rows(ContentItem, rows, type=content_type)

    async def insert_embedding(self, record: EmbeddingRecord) -> None:
        # Committed per record: a later failure must not undo items already reported as saved
        try:
            await self._session.execute(insert(VectorEmbedding).values(**record.model_dump()))
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

    async def get_user_language(self, user_id: uuid.UUID) -> UserLanguagePreference:
        result = await self._session.execute(
            select(User.native_language, TopLanguage.language)
            .outerjoin(TopLanguage, TopLanguage.code == User.native_language)
            .where(User.id == user_id)
        )
        row = result.mappings().one_or_none()
        if row is None:
            raise UserNotFoundError(user_id)
        return _decode_rows(UserLanguagePreference, [row])[0]

    async def match_all_content(
        self,
        query_embedding: list[float],
        match_threshold: float,
        match_count: int,
        user_id: uuid.UUID,
    ) -> list[SimilarityResult]:
        result = await self._session.execute(
            _MATCH_ALL_CONTENT,
            {
                "query_embedding": query_embedding,
                "match_threshold": match_threshold,
                "match_count": match_count,
                "p_user_id": user_id,
            },
        )
        rows = list(result.mappings().all())
        logger.info("Similarity search returned %d rows", len(rows))
        return _decode_rows(SimilarityResult, rows)

    async def insert_message(
        self, content: str, conversation_id: uuid.UUID, sender_id: uuid.UUID
    ) -> BotMessage:
        result = await self._session.execute(
            insert(Message)
            .values(content=content, conversation_id=conversation_id, sender_id=sender_id)
            .returning(Message)
        )
        return BotMessage.model_validate(result.scalar_one())
