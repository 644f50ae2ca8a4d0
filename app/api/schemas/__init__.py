"""API request and response schemas.

Import request/response models from the submodules (e.g. bot_messages_request_models,
embeddings_response_models) or from this package for a single entry point.
"""

from __future__ import annotations

from app.api.schemas.bot_messages_request_models import BotMessageRequest
from app.api.schemas.bot_messages_response_models import (
    BotMessageErrorResponse,
    BotMessageResponse,
)
from app.api.schemas.embeddings_response_models import BackfillErrorResponse, BackfillResponse
from app.api.schemas.meta_response_models import HealthResponse

__all__ = [
    "BackfillErrorResponse",
    "BackfillResponse",
    "BotMessageErrorResponse",
    "BotMessageRequest",
    "BotMessageResponse",
    "HealthResponse",
]
