"""Unit of Work: one transaction per request, session-scoped services from registry."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, cast

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session_maker
from app.services.bot_message_service import BotMessageService
from app.services.embedding_backfill_service import EmbeddingBackfillService


class UnitOfWork:
    """Holds the request's session and exposes session-scoped services from the registry."""

    def __init__(self, session: AsyncSession, services: dict[str, Any]) -> None:
        self._session = session
        self._services = services
        self._embedding_backfill_service: EmbeddingBackfillService | None = None
        self._bot_message_service: BotMessageService | None = None

    def _resolve(self, key: str) -> Any:
        service = self._services[key]
        if callable(service):
            return service(self._session)
        return service

    @property
    def embedding_backfill_service(self) -> EmbeddingBackfillService:
        """Session-scoped embedding backfill service."""
        if self._embedding_backfill_service is None:
            self._embedding_backfill_service = cast(
                EmbeddingBackfillService, self._resolve("embedding_backfill_service")
            )
        return self._embedding_backfill_service

    @property
    def bot_message_service(self) -> BotMessageService:
        """Session-scoped bot message service."""
        if self._bot_message_service is None:
            self._bot_message_service = cast(
                BotMessageService, self._resolve("bot_message_service")
            )
        return self._bot_message_service

    async def commit(self) -> None:
        """Commit the request's writes before the response is sent."""
        await self._session.commit()

    async def rollback(self) -> None:
        """Discard the request's pending writes when a handler fails without raising."""
        await self._session.rollback()


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    """Per-request dependency: one session, commit on success, rollback on exception."""
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield UnitOfWork(session, request.app.state.services)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
