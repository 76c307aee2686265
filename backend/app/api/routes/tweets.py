"""Tweets Route Group — public listings and authenticated posting.

Invariants:
    - Listings are newest first; a user with no tweets gets []
    - Unknown or malformed tweet id → 404 RESOURCE_NOT_FOUND
    - Malformed user id lists like an unknown user ([])
    - POST requires a valid bearer token; the author is the token's user
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import parsed_body
from app.core.domain_types import TweetId, UserId, parse_uuid
from app.core.errors import ResourceNotFoundError
from app.infrastructure.auth import get_current_user
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.tweet import TweetCreate, TweetResponse
from app.services.tweets import create_tweet, get_tweet, list_tweets

router = APIRouter(tags=["tweets"])


@router.get("", response_model=list[TweetResponse])
async def all_tweets(db: AsyncSession = Depends(get_db)):
    return await list_tweets(db)


@router.get("/user/{user_id}", response_model=list[TweetResponse])
async def tweets_by_user(user_id: str, db: AsyncSession = Depends(get_db)):
    author_id = parse_uuid(user_id)
    if author_id is None:
        return []
    return await list_tweets(db, user_id=UserId(author_id))


@router.get("/{tweet_id}", response_model=TweetResponse)
async def one_tweet(tweet_id: str, db: AsyncSession = Depends(get_db)):
    parsed_id = parse_uuid(tweet_id)
    if parsed_id is None:
        raise ResourceNotFoundError("Tweet", tweet_id)
    return await get_tweet(db, TweetId(parsed_id))


@router.post(
    "", response_model=TweetResponse, status_code=status.HTTP_201_CREATED,
)
async def post_tweet(
    body: TweetCreate = Depends(parsed_body(TweetCreate)),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Publish a tweet as the authenticated user."""
    return await create_tweet(db, user, body.text)
