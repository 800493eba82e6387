"""Reader bookmarks, interests and the interest-ranked feed.

Each reader owns two small JSON documents in the article container,
``bookmarks/{user_id}.json`` and ``interests/{user_id}.json``. A missing
document means "none yet".
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from pydantic import BaseModel

from newsreader.models.article import Article
from newsreader.models.reader import (
    Bookmark,
    BookmarkList,
    Interests,
    PersonalizedArticle,
    PersonalizedIndex,
)
from newsreader.services.article_store import (
    ArticleStoreError,
    get_article,
    list_articles,
    read_json_blob,
    validate_blob_path_segment,
    write_json_blob,
)

logger = logging.getLogger(__name__)

PERSONALIZED_FEED_LIMIT = 50


def _bookmarks_blob(user_id: str) -> str:
    return f"bookmarks/{validate_blob_path_segment(user_id)}.json"


def _interests_blob(user_id: str) -> str:
    return f"interests/{validate_blob_path_segment(user_id)}.json"


async def _read(name: str) -> Any | None:
    """Load a reader document. None if it does not exist or is unreadable.

    Raises:
        ArticleStoreError: Storage refused the read. Callers must not write
            back a fresh document in that case.
    """
    try:
        return await asyncio.to_thread(read_json_blob, name)
    except ResourceNotFoundError:
        return None
    except HttpResponseError as e:
        logger.warning("Azure API error reading %s: %s", name, e.message)
        raise ArticleStoreError(f"Read failed: {e.message}") from e
    except ValueError as e:
        logger.warning("Unreadable reader document %s: %s", name, e)
        return None


async def _write(name: str, document: BaseModel) -> None:
    try:
        await asyncio.to_thread(
            write_json_blob, name, document.model_dump_json(indent=2), True
        )
    except HttpResponseError as e:
        raise ArticleStoreError(f"Write failed: {e.message}") from e


async def get_bookmarks(user_id: str) -> BookmarkList:
    data = await _read(_bookmarks_blob(user_id))
    if data is None:
        return BookmarkList()
    try:
        return BookmarkList(**data)
    except (ValueError, TypeError) as e:
        logger.warning("Discarding malformed bookmarks for %s: %s", user_id, e)
        return BookmarkList()


async def add_bookmark(user_id: str, article_id: str) -> bool:
    """Bookmark an article. Returns False if it was already bookmarked."""
    current = await get_bookmarks(user_id)
    if any(b.article_id == article_id for b in current.bookmarks):
        return False
    bookmark = Bookmark(article_id=article_id, created_at=datetime.now(timezone.utc))
    current.bookmarks.insert(0, bookmark)
    await _write(_bookmarks_blob(user_id), current)
    logger.info("User %s bookmarked %s", user_id, article_id)
    return True


async def remove_bookmark(user_id: str, article_id: str) -> bool:
    """Drop a bookmark. Returns False if the article was not bookmarked."""
    current = await get_bookmarks(user_id)
    kept = [b for b in current.bookmarks if b.article_id != article_id]
    if len(kept) == len(current.bookmarks):
        return False
    await _write(_bookmarks_blob(user_id), BookmarkList(bookmarks=kept))
    return True


async def list_bookmarked_articles(user_id: str) -> PersonalizedIndex:
    """Bookmarked live articles, most recently bookmarked first.

    Bookmarks whose article was deleted or unpublished are left out.
    """
    current = await get_bookmarks(user_id)
    found = await asyncio.gather(
        *[get_article(b.article_id) for b in current.bookmarks]
    )
    articles = [
        PersonalizedArticle(**a.model_dump(), is_bookmarked=True)
        for a in found
        if a is not None and a.is_live
    ]
    return PersonalizedIndex(articles=articles, total=len(articles))


def normalize_interests(interests: list[str]) -> list[str]:
    """Trim, drop blanks and case-insensitive duplicates; keep first spelling."""
    seen: set[str] = set()
    result: list[str] = []
    for interest in interests:
        interest = interest.strip()
        if not interest or interest.lower() in seen:
            continue
        seen.add(interest.lower())
        result.append(interest)
    return result


async def get_interests(user_id: str) -> Interests:
    data = await _read(_interests_blob(user_id))
    if data is None:
        return Interests()
    try:
        return Interests(**data)
    except (ValueError, TypeError) as e:
        logger.warning("Discarding malformed interests for %s: %s", user_id, e)
        return Interests()


async def set_interests(user_id: str, interests: list[str]) -> Interests:
    """Replace a reader's interests wholesale."""
    document = Interests(interests=normalize_interests(interests))
    await _write(_interests_blob(user_id), document)
    logger.info("User %s now follows %d interests", user_id, len(document.interests))
    return document


def matches_interests(article: Article, interests: set[str]) -> bool:
    """True if the category or any tag equals a followed interest (any case)."""
    if article.category.lower() in interests:
        return True
    return any(tag.lower() in interests for tag in article.ai_tags)


async def personalized_feed(
    user_id: str,
    view: str = "all",
    limit: int = PERSONALIZED_FEED_LIMIT,
) -> PersonalizedIndex:
    """Live articles for one reader.

    Args:
        user_id: Reader identity.
        view: "all" ranks articles matching the reader's interests first,
            newest first within each group. "trending" does the same over
            trending articles only. "latest" is strictly newest first.
        limit: Maximum number of articles to return.
    """
    index, interests, bookmarks = await asyncio.gather(
        list_articles(live_only=True),
        get_interests(user_id),
        get_bookmarks(user_id),
    )
    wanted = {i.lower() for i in interests.interests}
    saved = {b.article_id for b in bookmarks.bookmarks}

    items = [
        PersonalizedArticle(
            **a.model_dump(),
            is_bookmarked=a.id in saved,
            matches_interests=matches_interests(a, wanted),
        )
        for a in index.articles
    ]

    if view == "trending":
        items = [a for a in items if a.is_trending]
    if view != "latest":
        # Stable sort: newest-first order is kept inside each group
        items.sort(key=lambda a: a.matches_interests, reverse=True)

    return PersonalizedIndex(articles=items[:limit], total=len(items))
