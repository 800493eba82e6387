"""Article store backed by Azure Blob Storage, one JSON blob per article.

The blob SDK client is synchronous, so every call into it runs in a worker
thread. Concurrent inserts from one ingestion batch overlap instead of
queueing on the event loop.
"""

import asyncio
import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any

from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.identity import ManagedIdentityCredential
from azure.storage.blob import ContainerClient, ContentSettings

from newsreader.config import get_settings
from newsreader.models.article import (
    AdminArticleIndex,
    Article,
    ArticleDraft,
    ArticleIndex,
    ArticleUpdate,
)

logger = logging.getLogger(__name__)

_SAFE_PATH_SEGMENT_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")

_JSON_CONTENT = ContentSettings(content_type="application/json")

# Lazy singleton, lives for the process lifetime
_container_client: ContainerClient | None = None


class ArticleStoreError(Exception):
    """The store rejected a write."""

    pass


def validate_blob_path_segment(segment: str) -> str:
    """Validate a user-supplied blob path segment.

    Rejects inputs containing path traversal sequences (..), slashes,
    backslashes, or other unsafe characters. Returns the segment unchanged
    if valid; raises ValueError otherwise.
    """
    if not segment or not _SAFE_PATH_SEGMENT_RE.match(segment):
        raise ValueError(f"Invalid blob path segment: {segment!r}")
    return segment


def is_safe_segment(segment: str) -> bool:
    return bool(segment) and bool(_SAFE_PATH_SEGMENT_RE.match(segment))


def _blob_name(article_id: str) -> str:
    return f"{validate_blob_path_segment(article_id)}.json"


def _get_credential() -> ManagedIdentityCredential:
    """Return Managed Identity credential."""
    settings = get_settings()
    return ManagedIdentityCredential(client_id=settings.managed_identity_client_id)


def _get_container_client() -> ContainerClient:
    """Return a shared blob container client for articles (lazy singleton)."""
    global _container_client
    if _container_client is None:
        settings = get_settings()
        account_url = f"https://{settings.azure_storage_account}.blob.core.windows.net"
        _container_client = ContainerClient(
            account_url=account_url,
            container_name=settings.azure_storage_container,
            credential=_get_credential(),
        )
    return _container_client


def check_storage_connectivity() -> bool:
    """Lightweight storage connectivity check: lists 1 blob."""
    try:
        client = _get_container_client()
        next(client.list_blobs(results_per_page=1).__iter__())
        return True
    except StopIteration:
        # Container exists but is empty: still connected
        return True
    except Exception:
        return False


def read_json_blob(name: str) -> Any:
    """Download and decode one JSON blob. Blocking; call via a thread.

    Raises:
        ResourceNotFoundError: The blob does not exist.
        ValueError: The blob is not valid JSON.
    """
    data = _get_container_client().get_blob_client(name).download_blob().readall()
    return json.loads(data)


def write_json_blob(name: str, payload: str, overwrite: bool) -> None:
    """Upload a serialized JSON document. Blocking; call via a thread."""
    _get_container_client().get_blob_client(name).upload_blob(
        payload,
        overwrite=overwrite,
        content_settings=_JSON_CONTENT,
    )


def _upload(article: Article, overwrite: bool) -> None:
    write_json_blob(
        _blob_name(article.id), article.model_dump_json(indent=2), overwrite
    )


async def insert_article(draft: ArticleDraft) -> Article:
    """Persist a new article and return the stored row.

    The store assigns ``id``, ``created_at``, ``published_at`` and
    ``view_count``.

    Raises:
        ArticleStoreError: If the blob write is rejected.
    """
    now = datetime.now(timezone.utc)
    article = Article(
        **draft.model_dump(),
        id=uuid.uuid4().hex,
        view_count=0,
        published_at=now,
        created_at=now,
    )
    try:
        await asyncio.to_thread(_upload, article, False)
    except ResourceExistsError as e:
        raise ArticleStoreError(f"Article {article.id} already exists") from e
    except HttpResponseError as e:
        logger.warning("Azure API error inserting article %s: %s", article.id, e.message)
        raise ArticleStoreError(f"Insert failed: {e.message}") from e
    return article


async def get_article(article_id: str) -> Article | None:
    """Read a single article by ID. Returns None if missing or unreadable."""
    if not is_safe_segment(article_id):
        return None
    try:
        data = await asyncio.to_thread(read_json_blob, _blob_name(article_id))
        return Article(**data)
    except ResourceNotFoundError:
        return None
    except HttpResponseError as e:
        logger.warning("Azure API error reading article %s: %s", article_id, e.message)
        return None
    except (ValueError, TypeError) as e:
        logger.warning("Unreadable article blob %s: %s", article_id, e)
        return None


def _load_all() -> list[Article]:
    """Read every article blob. Blocking; call via a thread.

    Only top-level ``*.json`` blobs are articles. Per-user documents live
    under their own prefixes and are skipped.
    """
    client = _get_container_client()
    articles: list[Article] = []
    for props in client.list_blobs():
        if "/" in props.name or not props.name.endswith(".json"):
            continue
        try:
            data = client.get_blob_client(props.name).download_blob().readall()
            articles.append(Article(**json.loads(data)))
        except ResourceNotFoundError:
            # Deleted between listing and download
            continue
        except (ValueError, TypeError) as e:
            logger.warning("Skipping unreadable article blob %s: %s", props.name, e)
    return articles


async def list_articles(
    *,
    live_only: bool = True,
    category: str | None = None,
    trending: bool | None = None,
    source: str | None = None,
    limit: int = 0,
    offset: int = 0,
    order_by: str = "published_at",
) -> ArticleIndex:
    """List articles, newest first.

    Args:
        live_only: Only return published articles (reader feed).
        category: Case-insensitive category match.
        trending: If set, only articles whose trending flag equals this value.
        source: Case-insensitive substring match on the source label.
        limit: Maximum number of articles to return (0 = unlimited).
        offset: Number of articles to skip before returning results.
        order_by: "published_at" or "created_at".
    """
    try:
        articles = await asyncio.to_thread(_load_all)
    except HttpResponseError as e:
        logger.warning("Azure API error listing articles: %s", e.message)
        return ArticleIndex(articles=[], total=0)

    if live_only:
        articles = [a for a in articles if a.is_live]

    if category:
        category_lower = category.lower()
        articles = [a for a in articles if a.category.lower() == category_lower]

    if trending is not None:
        articles = [a for a in articles if a.is_trending == trending]

    if source:
        source_lower = source.lower()
        articles = [a for a in articles if source_lower in a.source.lower()]

    articles.sort(key=lambda a: getattr(a, order_by), reverse=True)
    total = len(articles)

    if offset > 0:
        articles = articles[offset:]
    if limit > 0:
        articles = articles[:limit]

    return ArticleIndex(articles=articles, total=total)


async def update_article(article_id: str, changes: ArticleUpdate) -> Article | None:
    """Apply a partial update. Returns the updated article, or None if missing."""
    article = await get_article(article_id)
    if article is None:
        return None
    updated = article.model_copy(update=changes.model_dump(exclude_unset=True))
    try:
        await asyncio.to_thread(_upload, updated, True)
    except HttpResponseError as e:
        raise ArticleStoreError(f"Update failed: {e.message}") from e
    return updated


async def toggle_live(article_id: str) -> Article | None:
    """Flip an article between draft and live."""
    article = await get_article(article_id)
    if article is None:
        return None
    return await update_article(article_id, ArticleUpdate(is_live=not article.is_live))


def _delete(article_id: str) -> None:
    _get_container_client().get_blob_client(_blob_name(article_id)).delete_blob()


async def delete_article(article_id: str) -> bool:
    """Delete an article. Returns False if it did not exist."""
    if not is_safe_segment(article_id):
        return False
    try:
        await asyncio.to_thread(_delete, article_id)
        return True
    except ResourceNotFoundError:
        return False
    except HttpResponseError as e:
        raise ArticleStoreError(f"Delete failed: {e.message}") from e


async def increment_view_count(article_id: str) -> int | None:
    """Add one view to an article. Returns the new count, or None if missing."""
    article = await get_article(article_id)
    if article is None:
        return None
    article.view_count += 1
    try:
        await asyncio.to_thread(_upload, article, True)
    except HttpResponseError as e:
        raise ArticleStoreError(f"View count update failed: {e.message}") from e
    return article.view_count


async def list_admin_articles(
    status: str = "all",
    source: str | None = None,
    limit: int = 0,
    offset: int = 0,
) -> AdminArticleIndex:
    """List drafts and live articles for the content manager, newest created first.

    The ``live``/``draft`` counts cover every article matching ``source``,
    regardless of ``status``.
    """
    everything = await list_articles(
        live_only=False, source=source, order_by="created_at"
    )
    live = sum(1 for a in everything.articles if a.is_live)
    draft = everything.total - live

    articles = everything.articles
    if status == "live":
        articles = [a for a in articles if a.is_live]
    elif status == "draft":
        articles = [a for a in articles if not a.is_live]

    total = len(articles)
    if offset > 0:
        articles = articles[offset:]
    if limit > 0:
        articles = articles[:limit]

    return AdminArticleIndex(
        articles=articles, total=total, live=live, draft=draft
    )
