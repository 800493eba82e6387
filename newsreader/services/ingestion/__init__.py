"""Ingestion services for fetching, parsing, and enriching feed articles."""

from newsreader.services.ingestion.enrichment import (
    Enrichment,
    detect_category,
    enrich,
    extract_tags,
    is_trending,
    summarize,
)
from newsreader.services.ingestion.orchestrator import (
    IngestionResult,
    run_all_sources,
    run_source_ingestion,
)
from newsreader.services.ingestion.rss import (
    FEED_SOURCES,
    FeedEntry,
    InvalidSourceError,
    fetch_feed,
    fetch_source_entries,
    parse_feed_items,
)

__all__ = [
    "FEED_SOURCES",
    "Enrichment",
    "FeedEntry",
    "IngestionResult",
    "InvalidSourceError",
    "detect_category",
    "enrich",
    "extract_tags",
    "fetch_feed",
    "fetch_source_entries",
    "is_trending",
    "parse_feed_items",
    "run_all_sources",
    "run_source_ingestion",
    "summarize",
]
