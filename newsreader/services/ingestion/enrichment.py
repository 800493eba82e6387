"""Keyword-based article enrichment: category, tags, summary, trending flag.

Everything here is a pure function of the title and description. The keyword
tables are ordered; the first matching category wins and tags come out in
table order.
"""

from dataclasses import dataclass, field

DEFAULT_CATEGORY = "general"

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "technology",
        (
            "tech",
            "software",
            "artificial intelligence",
            "computer",
            "internet",
            "cyber",
            "digital",
            "smartphone",
            "robot",
        ),
    ),
    (
        "politics",
        (
            "election",
            "government",
            "president",
            "minister",
            "parliament",
            "senate",
            "congress",
            "vote",
            "political",
        ),
    ),
    (
        "business",
        (
            "business",
            "economy",
            "economic",
            "market",
            "stock",
            "trade",
            "company",
            "bank",
            "earnings",
        ),
    ),
    (
        "health",
        (
            "health",
            "medical",
            "hospital",
            "disease",
            "vaccine",
            "virus",
            "pandemic",
            "doctor",
        ),
    ),
    (
        "environment",
        (
            "climate",
            "environment",
            "pollution",
            "emissions",
            "renewable",
            "wildlife",
            "carbon",
            "wildfire",
        ),
    ),
    (
        "sports",
        (
            "sport",
            "football",
            "soccer",
            "olympic",
            "tennis",
            "cricket",
            "basketball",
            "championship",
        ),
    ),
)

TAG_KEYWORDS: tuple[str, ...] = (
    "Climate",
    "Economy",
    "Election",
    "Technology",
    "Health",
    "War",
    "Energy",
    "Trade",
    "Security",
    "Markets",
    "Diplomacy",
    "Protest",
    "Refugees",
    "Science",
    "Education",
    "Human Rights",
    "Sport",
)

TRENDING_KEYWORDS: tuple[str, ...] = (
    "breaking",
    "urgent",
    "major",
    "historic",
    "unprecedented",
    "crisis",
)

MAX_TAGS = 5

# Descriptions at or under this length are used as the summary verbatim
SUMMARY_MAX_LENGTH = 200

_SENTENCE_DELIMITER = ". "
_ELLIPSIS = "..."


@dataclass(frozen=True)
class Enrichment:
    """Metadata derived from an entry's text."""

    category: str = DEFAULT_CATEGORY
    tags: list[str] = field(default_factory=list)
    summary: str = ""
    is_trending: bool = False


def _combined_text(title: str, description: str) -> str:
    return f"{title} {description}".lower()


def detect_category(text: str) -> str:
    """First category whose keyword appears in ``text``, else "general"."""
    text = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def extract_tags(text: str) -> list[str]:
    text = text.lower()
    tags = [tag for tag in TAG_KEYWORDS if tag.lower() in text]
    return tags[:MAX_TAGS]


def is_trending(text: str) -> bool:
    text = text.lower()
    return any(keyword in text for keyword in TRENDING_KEYWORDS)


def summarize(description: str) -> str:
    """Short summary: the description itself, or its first sentence.

    Long descriptions are cut at the first ". " and get an ellipsis. A long
    description with no ". " in it is returned whole.
    """
    if len(description) <= SUMMARY_MAX_LENGTH:
        return description
    sentences = description.split(_SENTENCE_DELIMITER)
    if len(sentences) > 1:
        return sentences[0] + _ELLIPSIS
    return sentences[0]


def enrich(title: str, description: str) -> Enrichment:
    """Derive category, tags, summary and trending flag for one entry."""
    text = _combined_text(title, description)
    return Enrichment(
        category=detect_category(text),
        tags=extract_tags(text),
        summary=summarize(description),
        is_trending=is_trending(text),
    )
