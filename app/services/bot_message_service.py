"""Bot message service - answers a chat message from semantically similar content."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.content_store import ContentStore, SQLAlchemyContentStore
from app.db.schemas import BotMessage
from app.llm.client import LLMClient
from app.services.source_formatting import build_context, render_sources

logger = logging.getLogger(__name__)


class BotMessageService:
    """Service that retrieves context, asks the LLM for a reply, and stores it as a message."""

    def __init__(
        self,
        store: ContentStore,
        llm_client: LLMClient,
        *,
        bot_user_id: uuid.UUID,
        match_threshold: float,
        match_count: int,
    ) -> None:
        self._store = store
        self._llm_client = llm_client
        self._bot_user_id = bot_user_id
        self._match_threshold = match_threshold
        self._match_count = match_count

    async def reply(
        self, content: str, conversation_id: uuid.UUID, sender_id: uuid.UUID
    ) -> BotMessage:
        """Compose and persist the bot's reply to a user's message.

        Args:
            content: The user's message
            conversation_id: Conversation the reply is posted to
            sender_id: User who sent the message; scopes the similarity search

        Returns:
            The persisted bot message

        Raises:
            ContentStoreError: When the sender is unknown or a store call fails
            LLMServiceError: When the embedding or chat completion call fails
        """
        preference = await self._store.get_user_language(sender_id)

        embedding = await self._llm_client.generate_embedding(content)
        similar_content = await self._store.match_all_content(
            embedding, self._match_threshold, self._match_count, sender_id
        )

        context = build_context(similar_content)
        bot_reply = await self._llm_client.generate_bot_reply(
            message=content, context=context, language=preference.language
        )

        sources = render_sources(similar_content, bot_reply.relevant_sources)
        message = await self._store.insert_message(
            content=bot_reply.response + sources,
            conversation_id=conversation_id,
            sender_id=self._bot_user_id,
        )
        logger.info(
            "Posted bot reply %s to conversation %s citing %d sources",
            message.id,
            conversation_id,
            len(bot_reply.relevant_sources),
        )
        return message


def bot_message_service_factory_provider(
    llm_client: LLMClient,
) -> Callable[[AsyncSession], BotMessageService]:
    """Registry entry: builds a session-scoped bot message service from settings."""

    def factory(session: AsyncSession) -> BotMessageService:
        return BotMessageService(
            SQLAlchemyContentStore(session),
            llm_client,
            bot_user_id=settings.bot_user_id,
            match_threshold=settings.match_threshold,
            match_count=settings.match_count,
        )

    return factory
