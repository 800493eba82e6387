"""RSS feed fetching and tolerant item extraction.

Feeds are parsed with plain pattern matching rather than an XML parser: the
upstream feeds are not always well-formed, and a broken document should yield
fewer items instead of an error.
"""

import logging
import re
from types import MappingProxyType
from typing import TypedDict

from newsreader.config import get_settings
from newsreader.services.http_client import get_shared_client

logger = logging.getLogger(__name__)

# Source id -> feed URL. Unknown ids are rejected before any request is made.
FEED_SOURCES = MappingProxyType(
    {
        "aljazeera": "https://www.aljazeera.com/xml/rss/all.xml",
        "bbc": "https://feeds.bbci.co.uk/news/world/rss.xml",
        "reuters": "https://www.reutersagency.com/feed/?best-top-news",
    }
)

# Per-run ingestion cap
MAX_ITEMS_PER_FETCH = 10

_ITEM_RE = re.compile(r"<item[^>]*>([\s\S]*?)</item>")
_CDATA_RE = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")
_TAG_RE = re.compile(r"<[^>]*>")

# Decode order matters: &amp; must come after &quot; so "&amp;quot;" stays "&quot;"
_ENTITIES = (
    ("&quot;", '"'),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


class InvalidSourceError(ValueError):
    """Source id is not in FEED_SOURCES."""

    pass


class FeedEntry(TypedDict):
    """One item extracted from a feed."""

    title: str
    description: str
    link: str
    source: str


def resolve_feed_url(source: str) -> str:
    """Map a source id to its feed URL.

    Raises:
        InvalidSourceError: If the id is not a known source.
    """
    try:
        return FEED_SOURCES[source]
    except (KeyError, TypeError):
        raise InvalidSourceError("Invalid news source") from None


def source_label(source: str) -> str:
    """Display label for a source id: first character upper-cased."""
    return source[:1].upper() + source[1:]


def extract_tag(content: str, tag_name: str) -> str | None:
    """Return the inner text of the first ``<tag_name>`` element, or None."""
    pattern = rf"<{re.escape(tag_name)}[^>]*>([\s\S]*?)</{re.escape(tag_name)}>"
    match = re.search(pattern, content, re.IGNORECASE)
    return match.group(1) if match else None


def clean_text(text: str) -> str:
    """Unwrap CDATA, strip markup, decode the basic entities, trim."""
    text = _CDATA_RE.sub(r"\1", text)
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def parse_feed_items(feed_text: str, source: str) -> list[FeedEntry]:
    """Extract up to MAX_ITEMS_PER_FETCH entries from raw feed text.

    Items without a title are skipped. Description and link default to "".
    Malformed or empty input yields an empty list.

    Args:
        feed_text: Raw RSS document.
        source: Source id; its label is stamped on every entry.

    Returns:
        Entries in document order.
    """
    label = source_label(source)
    entries: list[FeedEntry] = []

    for match in _ITEM_RE.finditer(feed_text or ""):
        item = match.group(1)

        title = extract_tag(item, "title")
        if not title:
            continue

        description = extract_tag(item, "description")
        link = extract_tag(item, "link")

        entries.append(
            {
                "title": clean_text(title),
                "description": clean_text(description or ""),
                "link": clean_text(link or ""),
                "source": label,
            }
        )
        if len(entries) == MAX_ITEMS_PER_FETCH:
            break

    return entries


async def fetch_feed(url: str, timeout: float | None = None) -> str:
    """Fetch RSS feed content from URL.

    Args:
        url: The RSS feed URL to fetch.
        timeout: Request timeout in seconds. Defaults to the configured value.

    Returns:
        Feed content as string.

    Raises:
        httpx.HTTPError: On network or HTTP errors.
    """
    settings = get_settings()
    client = get_shared_client()
    response = await client.get(
        url,
        timeout=timeout if timeout is not None else settings.feed_request_timeout,
        follow_redirects=True,
        headers={
            "User-Agent": settings.feed_user_agent,
            "Accept": "application/rss+xml, application/xml, text/xml",
        },
    )
    response.raise_for_status()
    return response.text


async def fetch_source_entries(source: str) -> list[FeedEntry]:
    """Resolve, fetch and parse one source.

    Raises:
        InvalidSourceError: Unknown source id (no request is made).
        httpx.HTTPError: On network or HTTP errors.
    """
    url = resolve_feed_url(source)
    logger.info("Fetching RSS from: %s", url)
    feed_text = await fetch_feed(url)
    entries = parse_feed_items(feed_text, source)
    logger.info("Parsed %d items from %s", len(entries), source)
    return entries
