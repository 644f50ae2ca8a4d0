from __future__ import annotations

from fastapi import APIRouter

from app.api.bot_messages_api import router as bot_messages_router
from app.api.embeddings_api import router as embeddings_router
from app.api.meta_api import router as meta_router

router = APIRouter()

# Include sub-routers
router.include_router(meta_router, prefix="/meta", tags=["meta"])
router.include_router(embeddings_router, prefix="/embeddings", tags=["embeddings"])
router.include_router(bot_messages_router, prefix="/bot-messages", tags=["bot-messages"])
