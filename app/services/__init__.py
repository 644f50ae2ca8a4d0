from app.services.bot_message_service import BotMessageService
from app.services.embedding_backfill_service import (
    BackfillItemResult,
    BackfillResult,
    BackfillStatus,
    EmbeddingBackfillService,
)

__all__ = [
    "BackfillItemResult",
    "BackfillResult",
    "BackfillStatus",
    "BotMessageService",
    "EmbeddingBackfillService",
]
