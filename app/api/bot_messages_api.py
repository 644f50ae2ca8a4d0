from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies.unit_of_work import UnitOfWork, get_uow
from app.api.openapi_responses import (
    ErrorExample,
    error_responses,
    rate_limited_example,
    validation_error_example,
)
from app.api.schemas.bot_messages_request_models import BotMessageRequest
from app.api.schemas.bot_messages_response_models import (
    BOT_MESSAGE_FAILED,
    BotMessageErrorResponse,
    BotMessageResponse,
)
from app.core.rate_limit import BOT_MESSAGE_RATE_LIMIT, limit, rate_limit_ip_key

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    summary="Post a bot reply to a chat message",
    description=(
        "Answer the message from content similar to it that the sender can see, cite the "
        "sources used, and store the answer as a message from the bot."
    ),
    response_model=BotMessageResponse,
    responses=error_responses(
        validation_error_example("content"),
        rate_limited_example(),
        ErrorExample(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            example_name="bot_message_failed",
            description="Any step of the reply failed",
            model=BotMessageErrorResponse,
            value={"error": BOT_MESSAGE_FAILED},
        ),
    ),
)
@limit(BOT_MESSAGE_RATE_LIMIT, key_func=rate_limit_ip_key)
async def create_bot_message(
    request: Request,
    request_data: BotMessageRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> BotMessageResponse | JSONResponse:
    """Reply to a user's chat message as the bot."""
    try:
        message = await uow.bot_message_service.reply(
            content=request_data.content,
            conversation_id=request_data.conversation_id,
            sender_id=request_data.sender_id,
        )
        await uow.commit()
    except Exception:
        # Details stay in the server log; callers only learn that the reply failed
        logger.exception("Error in bot message route")
        await uow.rollback()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=BotMessageErrorResponse().model_dump(),
        )
    return BotMessageResponse(message=message)
