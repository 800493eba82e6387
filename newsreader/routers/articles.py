"""Reader-facing article endpoints — live articles only."""

from fastapi import APIRouter, HTTPException, Query

from newsreader.models.article import Article, ArticleIndex, ViewCount
from newsreader.services.article_store import (
    get_article,
    increment_view_count,
    list_articles,
)

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=ArticleIndex)
async def list_live_articles(
    category: str | None = Query(
        default=None,
        description="Filter articles by category (case-insensitive)",
    ),
    trending: bool | None = Query(
        default=None,
        description="Only trending (true) or non-trending (false) articles",
    ),
    limit: int = Query(
        default=20,
        ge=1,
        le=200,
        description="Maximum number of articles to return",
    ),
    offset: int = Query(
        default=0,
        ge=0,
        description="Number of articles to skip",
    ),
):
    """Get published articles, newest first."""
    return await list_articles(
        live_only=True,
        category=category,
        trending=trending,
        limit=limit,
        offset=offset,
    )


@router.get("/{article_id}", response_model=Article)
async def get_live_article(article_id: str):
    """Get a single published article by ID."""
    article = await get_article(article_id)
    if not article or not article.is_live:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.post("/{article_id}/view", response_model=ViewCount)
async def record_view(article_id: str):
    """Count one view of an article."""
    view_count = await increment_view_count(article_id)
    if view_count is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return ViewCount(id=article_id, view_count=view_count)
