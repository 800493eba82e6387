"""Per-reader endpoints: bookmarks, interests, personalized feed.

The reader is identified by ``X-User-ID``, set by the identity gateway in
front of this service.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from newsreader.models.reader import Interests, PersonalizedIndex
from newsreader.services.article_store import get_article, is_safe_segment
from newsreader.services.reader_profile import (
    PERSONALIZED_FEED_LIMIT,
    add_bookmark,
    get_interests,
    list_bookmarked_articles,
    personalized_feed,
    remove_bookmark,
    set_interests,
)


def current_user_id(x_user_id: str = Header(default="")) -> str:
    if not is_safe_segment(x_user_id):
        raise HTTPException(status_code=401, detail="Sign in required")
    return x_user_id


router = APIRouter(prefix="/me", tags=["reader"])


@router.get("/feed", response_model=PersonalizedIndex)
async def get_feed(
    view: Literal["all", "trending", "latest"] = Query(default="all"),
    limit: int = Query(default=PERSONALIZED_FEED_LIMIT, ge=1, le=200),
    user_id: str = Depends(current_user_id),
):
    """Live articles ranked by the reader's interests."""
    return await personalized_feed(user_id, view=view, limit=limit)


@router.get("/bookmarks", response_model=PersonalizedIndex)
async def get_bookmarks(user_id: str = Depends(current_user_id)):
    return await list_bookmarked_articles(user_id)


@router.put("/bookmarks/{article_id}", status_code=204)
async def put_bookmark(article_id: str, user_id: str = Depends(current_user_id)):
    """Bookmark a live article. Bookmarking twice is a no-op."""
    article = await get_article(article_id)
    if not article or not article.is_live:
        raise HTTPException(status_code=404, detail="Article not found")
    await add_bookmark(user_id, article_id)


@router.delete("/bookmarks/{article_id}", status_code=204)
async def delete_bookmark(article_id: str, user_id: str = Depends(current_user_id)):
    if not await remove_bookmark(user_id, article_id):
        raise HTTPException(status_code=404, detail="Bookmark not found")


@router.get("/interests", response_model=Interests)
async def read_interests(user_id: str = Depends(current_user_id)):
    return await get_interests(user_id)


@router.put("/interests", response_model=Interests)
async def replace_interests(body: Interests, user_id: str = Depends(current_user_id)):
    """Replace the reader's interests. Blank and duplicate entries are dropped."""
    return await set_interests(user_id, body.interests)
