from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies.unit_of_work import UnitOfWork, get_uow
from app.api.openapi_responses import ErrorExample, error_responses, rate_limited_example
from app.api.schemas.embeddings_response_models import BackfillErrorResponse, BackfillResponse
from app.core.rate_limit import BACKFILL_RATE_LIMIT, limit, rate_limit_ip_key

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/backfill",
    summary="Embed content that has no embedding yet",
    description=(
        "Embed every post, message and thread comment that lacks a vector. Items that "
        "fail are reported individually; only a failure to list the work aborts the pass."
    ),
    response_model=BackfillResponse,
    response_model_exclude_none=True,
    responses=error_responses(
        ErrorExample(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            example_name="content_fetch_failed",
            description="Content without embeddings could not be listed",
            model=BackfillErrorResponse,
            value={
                "success": False,
                "error": "Error fetching post rows: connection refused",
            },
        ),
        rate_limited_example(),
    ),
)
@limit(BACKFILL_RATE_LIMIT, key_func=rate_limit_ip_key)
async def backfill_embeddings(
    request: Request,
    uow: UnitOfWork = Depends(get_uow),
) -> BackfillResponse | JSONResponse:
    """Run one embedding backfill pass."""
    try:
        result = await uow.embedding_backfill_service.run()
    except Exception as exc:
        # Item failures are recorded in the results; anything raised here is a fetch failure
        logger.exception("Error processing embeddings")
        await uow.rollback()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=BackfillErrorResponse(error=str(exc)).model_dump(),
        )
    return BackfillResponse(results=result.results)
