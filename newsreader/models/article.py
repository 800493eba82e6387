"""Article data models."""

from datetime import datetime

from pydantic import BaseModel, Field


class ArticleDraft(BaseModel):
    """Article fields supplied by the writer; the store assigns the rest."""

    title: str
    content: str
    summary: str = ""
    ai_summary: str | None = None
    ai_tags: list[str] = []
    source: str
    source_url: str = ""
    category: str = "general"
    is_live: bool = False
    is_trending: bool = False
    reading_time: int = Field(default=1, ge=1)


class Article(ArticleDraft):
    """A persisted article."""

    id: str
    view_count: int = 0
    published_at: datetime
    created_at: datetime


class ArticleUpdate(BaseModel):
    """Partial edit of an existing article. Unset fields are left alone."""

    title: str | None = None
    content: str | None = None
    summary: str | None = None
    ai_summary: str | None = None
    ai_tags: list[str] | None = None
    source: str | None = None
    source_url: str | None = None
    category: str | None = None
    is_live: bool | None = None
    is_trending: bool | None = None
    reading_time: int | None = Field(default=None, ge=1)


class ArticleIndex(BaseModel):
    """A page of articles."""

    articles: list[Article]
    total: int


class AdminArticleIndex(ArticleIndex):
    """Article page with draft/live counts for the content manager."""

    live: int = 0
    draft: int = 0


class ViewCount(BaseModel):
    id: str
    view_count: int


class FetchNewsRequest(BaseModel):
    """Body of a fetch-news invocation."""

    source: str | None = None


class FetchNewsResponse(BaseModel):
    message: str
    count: int


class SourceFetchResult(BaseModel):
    """Outcome of ingesting one source during a fan-out run."""

    source: str
    count: int = 0
    message: str | None = None
    error: str | None = None


class FetchAllResponse(BaseModel):
    total: int
    results: list[SourceFetchResult]
