"""Content management endpoints. Protected by API key."""

from typing import Literal

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from newsreader.config import get_settings
from newsreader.models.article import (
    AdminArticleIndex,
    Article,
    ArticleDraft,
    ArticleUpdate,
    FetchAllResponse,
)
from newsreader.services.article_store import (
    delete_article,
    insert_article,
    list_admin_articles,
    toggle_live,
    update_article,
)
from newsreader.services.ingestion.orchestrator import run_all_sources


def require_admin_key(x_admin_key: str = Header(default="")) -> None:
    settings = get_settings()
    if not settings.admin_api_key or x_admin_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid admin key")


router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)


@router.get("/articles", response_model=AdminArticleIndex)
async def list_all_articles(
    status: Literal["all", "live", "draft"] = Query(default="all"),
    source: str | None = Query(
        default=None,
        description="Filter by source name (case-insensitive substring)",
    ),
    limit: int = Query(default=0, ge=0, le=500),
    offset: int = Query(default=0, ge=0),
):
    """List drafts and live articles, newest first, with status counts."""
    return await list_admin_articles(
        status=status, source=source, limit=limit, offset=offset
    )


@router.post("/articles", response_model=Article, status_code=201)
async def create_article(draft: ArticleDraft):
    """Create an article by hand. It may be published immediately."""
    return await insert_article(draft)


@router.patch("/articles/{article_id}", response_model=Article)
async def edit_article(article_id: str, changes: ArticleUpdate):
    article = await update_article(article_id, changes)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.post("/articles/{article_id}/toggle", response_model=Article)
async def toggle_article_status(article_id: str):
    """Publish a draft or unpublish a live article."""
    article = await toggle_live(article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.delete("/articles/{article_id}", status_code=204)
async def remove_article(article_id: str):
    if not await delete_article(article_id):
        raise HTTPException(status_code=404, detail="Article not found")


@router.post("/fetch-news", response_model=FetchAllResponse)
async def fetch_news_from_all_sources():
    """Ingest every feed source. Sources fail independently."""
    results = await run_all_sources()
    return FetchAllResponse(total=sum(r.count for r in results), results=results)
