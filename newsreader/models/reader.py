"""Per-reader data models: bookmarks, interests, personalized feed."""

from datetime import datetime

from pydantic import BaseModel, Field

from newsreader.models.article import Article


class Bookmark(BaseModel):
    article_id: str
    created_at: datetime


class BookmarkList(BaseModel):
    """Stored document: one reader's bookmarks, most recent first."""

    bookmarks: list[Bookmark] = []


class Interests(BaseModel):
    """Topics a reader follows. Matched against category and tags."""

    interests: list[str] = Field(default_factory=list, max_length=50)


class PersonalizedArticle(Article):
    is_bookmarked: bool = False
    matches_interests: bool = False


class PersonalizedIndex(BaseModel):
    articles: list[PersonalizedArticle]
    total: int
