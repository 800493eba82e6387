"""
News Reader API

Reader feed, content management, and the fetch-news ingestion function.
"""

import logging
import time
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from newsreader.config import get_settings
from newsreader.middleware import PreflightCORSMiddleware, RequestContextMiddleware
from newsreader.routers import admin, articles, functions, reader
from newsreader.services.article_store import (
    ArticleStoreError,
    check_storage_connectivity,
)
from newsreader.services.http_client import close_shared_client

logger = logging.getLogger(__name__)

settings = get_settings()

# Health check cache: (result_dict, timestamp)
_health_cache: tuple[dict[str, Any], float] | None = None
_HEALTH_CACHE_TTL = 30  # seconds


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    yield
    await close_shared_client()


app = FastAPI(
    title="News Reader API",
    description="Personalized news reader backed by RSS ingestion",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Request ID and security headers
app.add_middleware(RequestContextMiddleware)

# CORS; pre-flights always answer "ok"
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=settings.cors_allow_headers,
)

# Routers
app.include_router(articles.router, prefix="/api/newsreader")
app.include_router(reader.router, prefix="/api/newsreader")
app.include_router(admin.router, prefix="/api/newsreader")
app.include_router(functions.router, prefix="/api/newsreader")


@app.exception_handler(ArticleStoreError)
async def article_store_error_handler(
    request: Request, exc: ArticleStoreError
) -> JSONResponse:
    logger.error("Article store error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def _check_config() -> str:
    """Verify required configuration is loaded. Returns 'ok' or 'fail'."""
    s = get_settings()
    if s.azure_storage_account and s.azure_storage_container:
        return "ok"
    return "fail"


def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    global _health_cache
    now = time.time()
    if _health_cache is not None:
        cached_result, cached_at = _health_cache
        if now - cached_at < _HEALTH_CACHE_TTL:
            return cached_result

    config_status = _check_config()
    storage_status = "ok" if check_storage_connectivity() else "fail"

    checks = {"config": config_status, "storage": storage_status}
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded — failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    result: dict[str, Any] = {
        "status": overall,
        "service": "newsreader-api",
        "version": "0.1.0",
        "environment": get_settings().environment,
        "checks": checks,
    }
    _health_cache = (result, now)
    return result


@app.get("/api/newsreader/health")
async def health_check() -> JSONResponse:
    """Health check verifying service dependencies."""
    result = _run_health_checks()
    status_code = 200 if result["status"] in ("ok", "degraded") else 503
    return JSONResponse(content=result, status_code=status_code)
