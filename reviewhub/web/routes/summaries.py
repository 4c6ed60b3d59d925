"""
Likes/dislikes generation route.

Unlike the other routes, responses use a ``success`` envelope:
``{success: true, data, message}`` or ``{success: false, error, details?}``.
The body is read by hand so that malformed JSON gets the same envelope.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from reviewhub.domain.errors import InvalidArgument, ReviewHubError
from reviewhub.infrastructure.llm import SummaryService

from ..auth import get_summary_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["summaries"])


async def _read_body(request: Request) -> Dict[str, Any]:
    """Decoded JSON object; empty or non-object bodies read as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise InvalidArgument("Invalid request body") from e
    return body if isinstance(body, dict) else {}


@router.post("/generate-likes-dislikes")
async def generate_likes_dislikes(
    request: Request,
    service: SummaryService = Depends(get_summary_service),
):
    try:
        body = await _read_body(request)
        title = body.get("productTitle")
        result = await run_in_threadpool(
            service.summarize,
            body.get("reviews"),
            str(title) if title else None,
        )
    except ReviewHubError as e:
        if e.status_code >= 500:
            logger.error(f"Likes/dislikes generation failed: {e.message}")
        return JSONResponse({"success": False, **e.to_dict()}, status_code=e.status_code)

    return {
        "success": True,
        "data": result.model_dump(),
        "message": "Likes and dislikes generated successfully",
    }
