"""Embedding backfill service - embeds stored content that has no vector yet."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.content_store import ContentStore, SQLAlchemyContentStore
from app.db.schemas import ContentItem, ContentType, EmbeddingRecord
from app.llm.client import LLMClient

logger = logging.getLogger(__name__)

NO_CONTENT_ERROR = "No content"


class BackfillStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"


class BackfillItemResult(BaseModel):
    """Outcome for one content row."""

    content_type: ContentType
    content_id: uuid.UUID
    status: BackfillStatus
    error: str | None = None


class BackfillResult(BaseModel):
    results: list[BackfillItemResult] = Field(default_factory=list)


class EmbeddingBackfillService:
    """Service that embeds every content row missing a vector, one row at a time."""

    def __init__(self, store: ContentStore, llm_client: LLMClient) -> None:
        self._store = store
        self._llm_client = llm_client

    async def fetch_content_without_embeddings(self) -> list[ContentItem]:
        """List rows missing an embedding across all content categories.

        Raises:
            ContentFetchError: When any category query fails. Nothing has been
                written at that point.
        """
        logger.info("Fetching content without embeddings")
        items: list[ContentItem] = []
        for content_type in ContentType:
            items.extend(await self._store.fetch_items_without_embeddings(content_type))
        logger.info("Fetched %d items without embeddings", len(items))
        return items

    async def embed_item(self, item: ContentItem) -> BackfillItemResult:
        """Embed and store a single item, reporting failure instead of raising."""
        logger.info("Processing %s id: %s", item.type, item.id)
        if not item.content:
            logger.warning("%s id %s has no content. Skipping.", item.type, item.id)
            return BackfillItemResult(
                content_type=item.type,
                content_id=item.id,
                status=BackfillStatus.FAILED,
                error=NO_CONTENT_ERROR,
            )

        try:
            embedding = await self._llm_client.generate_embedding(item.content)
            await self._store.insert_embedding(EmbeddingRecord.for_item(item, embedding))
        except Exception as exc:
            logger.exception("Error processing %s id %s", item.type, item.id)
            return BackfillItemResult(
                content_type=item.type,
                content_id=item.id,
                status=BackfillStatus.FAILED,
                error=str(exc),
            )

        logger.info("Saved embedding for %s id: %s", item.type, item.id)
        return BackfillItemResult(
            content_type=item.type, content_id=item.id, status=BackfillStatus.SUCCESS
        )

    async def run(self) -> BackfillResult:
        """Run a full scan-and-fill pass.

        Returns:
            BackfillResult with one entry per fetched row, in fetch order.

        Raises:
            ContentFetchError: When the work list cannot be fetched.
        """
        items = await self.fetch_content_without_embeddings()
        result = BackfillResult()
        for item in items:
            result.results.append(await self.embed_item(item))
        failed = sum(1 for entry in result.results if entry.status is BackfillStatus.FAILED)
        logger.info("Processed %d items (%d failed)", len(result.results), failed)
        return result


def embedding_backfill_service_factory_provider(
    llm_client: LLMClient,
) -> Callable[[AsyncSession], EmbeddingBackfillService]:
    """Registry entry: builds a session-scoped backfill service sharing one LLM client."""

    def factory(session: AsyncSession) -> EmbeddingBackfillService:
        return EmbeddingBackfillService(SQLAlchemyContentStore(session), llm_client)

    return factory
