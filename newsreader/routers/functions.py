"""fetch-news function endpoint — ingest one feed source as draft articles."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from newsreader.middleware import request_id_var
from newsreader.models.article import FetchNewsRequest, FetchNewsResponse
from newsreader.services.ingestion.orchestrator import run_source_ingestion

router = APIRouter(prefix="/functions", tags=["functions"])
logger = logging.getLogger(__name__)


@router.options("/fetch-news")
async def fetch_news_preflight():
    """CORS pre-flight. Headers are added by the CORS middleware."""
    return PlainTextResponse("ok")


@router.post(
    "/fetch-news",
    response_model=FetchNewsResponse,
    responses={400: {"description": "Invalid source, bad body, or fetch failure"}},
)
async def fetch_news(request: Request):
    """Fetch a source's feed and store its items as drafts.

    Body: ``{"source": "bbc"}``. Any failure, including an unreadable body,
    is reported as 400 ``{"error": ...}``.
    """
    try:
        body = FetchNewsRequest.model_validate(await request.json())
        result = await run_source_ingestion(body.source)
    except Exception as e:
        logger.exception(
            "Error in fetch-news function (request %s)", request_id_var.get()
        )
        return JSONResponse(status_code=400, content={"error": str(e)})
    return result.to_dict()
