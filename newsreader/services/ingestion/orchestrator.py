"""Article ingestion orchestrator — ties fetch, parse, enrich, and insert together."""

import asyncio
import logging
from dataclasses import dataclass

from newsreader.models.article import Article, ArticleDraft, SourceFetchResult
from newsreader.services.article_store import insert_article
from newsreader.services.ingestion.enrichment import enrich
from newsreader.services.ingestion.rss import (
    FEED_SOURCES,
    FeedEntry,
    fetch_source_entries,
)

logger = logging.getLogger(__name__)

# Characters of description per minute of reading
CHARS_PER_READING_MINUTE = 250


@dataclass
class IngestionResult:
    """Outcome of ingesting one source."""

    source: str
    attempted: int
    count: int

    @property
    def message(self) -> str:
        return f"Successfully fetched {self.count} articles from {self.source}"

    def to_dict(self) -> dict:
        return {"message": self.message, "count": self.count}


def estimate_reading_time(description: str) -> int:
    """Whole minutes to read a description, never less than one."""
    return max(1, len(description) // CHARS_PER_READING_MINUTE)


def build_draft(entry: FeedEntry) -> ArticleDraft:
    """Enrich a feed entry and map it onto a draft article."""
    enrichment = enrich(entry["title"], entry["description"])
    return ArticleDraft(
        title=entry["title"],
        content=entry["description"] or entry["title"],
        summary=entry["description"],
        ai_summary=enrichment.summary,
        ai_tags=list(enrichment.tags),
        source=entry["source"],
        source_url=entry["link"],
        category=enrichment.category,
        is_live=False,
        is_trending=enrichment.is_trending,
        reading_time=estimate_reading_time(entry["description"]),
    )


async def _ingest_entry(entry: FeedEntry) -> Article | None:
    """Enrich and insert one entry. A rejected insert yields None."""
    try:
        return await insert_article(build_draft(entry))
    except Exception as e:
        logger.error("Error inserting article '%s': %s", entry["title"][:60], e)
        return None


async def run_source_ingestion(source: str) -> IngestionResult:
    """Fetch one source and insert every parsed item as a draft.

    Items are inserted concurrently. A failed insert only drops that item.

    Raises:
        InvalidSourceError: Unknown source id.
        httpx.HTTPError: The feed could not be fetched.
    """
    entries = await fetch_source_entries(source)

    results = await asyncio.gather(*[_ingest_entry(entry) for entry in entries])
    count = sum(1 for r in results if r is not None)

    if count < len(entries):
        logger.warning(
            "%d of %d items from %s were not stored",
            len(entries) - count,
            len(entries),
            source,
        )
    logger.info("Ingested %d articles from %s", count, source)

    return IngestionResult(source=source, attempted=len(entries), count=count)


async def run_all_sources(
    sources: list[str] | None = None,
) -> list[SourceFetchResult]:
    """Ingest several sources concurrently, one result per source.

    A failing source is reported in its result and does not stop the others.

    Args:
        sources: Source ids to ingest. Defaults to every known source.
    """
    if sources is None:
        sources = list(FEED_SOURCES)

    outcomes = await asyncio.gather(
        *[run_source_ingestion(source) for source in sources],
        return_exceptions=True,
    )

    results: list[SourceFetchResult] = []
    for source, outcome in zip(sources, outcomes):
        if isinstance(outcome, BaseException):
            logger.error("Error fetching from %s: %s", source, outcome)
            results.append(SourceFetchResult(source=source, error=str(outcome)))
            continue
        results.append(
            SourceFetchResult(
                source=source, count=outcome.count, message=outcome.message
            )
        )

    logger.info(
        "Fetched %d articles from %d sources",
        sum(r.count for r in results),
        len(sources),
    )
    return results
