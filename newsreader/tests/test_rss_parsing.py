"""Tests for feed item extraction — pure functions, no external calls."""

from newsreader.services.ingestion.rss import (
    MAX_ITEMS_PER_FETCH,
    clean_text,
    extract_tag,
    parse_feed_items,
    source_label,
)


def _item(title=None, description=None, link=None, attrs=""):
    parts = []
    if title is not None:
        parts.append(f"<title>{title}</title>")
    if description is not None:
        parts.append(f"<description>{description}</description>")
    if link is not None:
        parts.append(f"<link>{link}</link>")
    return f"<item{attrs}>{''.join(parts)}</item>"


def _feed(*items):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0"><channel><title>Test Feed</title>'
        + "".join(items)
        + "</channel></rss>"
    )


_FEED_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>World News</title>
    <item>
      <title>First Article</title>
      <link>https://example.com/article-1</link>
      <description>Description one</description>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://example.com/article-2</link>
      <description>Description two</description>
    </item>
  </channel>
</rss>
"""


def test_parse_feed_items_extracts_entries():
    entries = parse_feed_items(_FEED_XML, "bbc")
    assert len(entries) == 2
    assert entries[0] == {
        "title": "First Article",
        "description": "Description one",
        "link": "https://example.com/article-1",
        "source": "Bbc",
    }
    assert entries[1]["title"] == "Second Article"


def test_caps_at_ten_items_in_document_order():
    feed = _feed(*[_item(title=f"Story {i}") for i in range(25)])
    entries = parse_feed_items(feed, "bbc")
    assert len(entries) == MAX_ITEMS_PER_FETCH == 10
    assert [e["title"] for e in entries] == [f"Story {i}" for i in range(10)]


def test_fewer_than_cap_returns_all():
    feed = _feed(*[_item(title=f"Story {i}") for i in range(3)])
    assert len(parse_feed_items(feed, "bbc")) == 3


def test_skips_items_without_title():
    feed = _feed(
        _item(description="No title here", link="https://example.com/x"),
        _item(title="Has Title"),
        _item(title=""),
    )
    entries = parse_feed_items(feed, "reuters")
    assert [e["title"] for e in entries] == ["Has Title"]


def test_untitled_items_do_not_count_toward_cap():
    items = [_item(description="untitled") for _ in range(5)]
    items += [_item(title=f"Story {i}") for i in range(12)]
    entries = parse_feed_items(_feed(*items), "bbc")
    assert len(entries) == 10
    assert entries[0]["title"] == "Story 0"


def test_missing_description_and_link_default_to_empty():
    entries = parse_feed_items(_feed(_item(title="Bare")), "bbc")
    assert entries[0]["description"] == ""
    assert entries[0]["link"] == ""


def test_item_tag_with_attributes():
    feed = _feed(_item(title="Attributed", attrs=' rdf:about="https://x.test/1"'))
    entries = parse_feed_items(feed, "aljazeera")
    assert entries[0]["title"] == "Attributed"
    assert entries[0]["source"] == "Aljazeera"


def test_empty_and_malformed_input_yield_no_entries():
    assert parse_feed_items("", "bbc") == []
    assert parse_feed_items("<html><body>Not a feed</body></html>", "bbc") == []
    assert parse_feed_items("<item><title>Unclosed", "bbc") == []


def test_cdata_unwrapped_before_tags_stripped():
    feed = _feed("<item><title><![CDATA[Breaking: <b>Markets</b> Rally]]></title></item>")
    entries = parse_feed_items(feed, "bbc")
    assert entries[0]["title"] == "Breaking: Markets Rally"


def test_extract_tag_is_case_insensitive_and_takes_first():
    content = "<TITLE>Upper</TITLE><title>Second</title>"
    assert extract_tag(content, "title") == "Upper"


def test_extract_tag_missing_returns_none():
    assert extract_tag("<title>Only title</title>", "description") is None


def test_clean_text_decodes_entities():
    assert clean_text("&quot;hello&quot;") == '"hello"'
    assert clean_text("Tom &amp; Jerry") == "Tom & Jerry"
    assert clean_text("&lt;tag&gt;") == "<tag>"


def test_clean_text_decodes_amp_after_quot():
    # One pass only: an escaped entity is not decoded twice
    assert clean_text("&amp;quot;hello&amp;quot;") == "&quot;hello&quot;"


def test_clean_text_strips_markup_and_whitespace():
    assert clean_text("  <p>Hello <a href='x'>world</a></p>\n ") == "Hello world"


def test_source_label_capitalizes_first_character():
    assert source_label("bbc") == "Bbc"
    assert source_label("reuters") == "Reuters"
    assert source_label("") == ""
