"""Tweets Service — queries and creation for the tweets route group.

Invariants:
    - Listings are newest first
    - A tweet is always owned by an existing user (FK)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import TweetId, UserId
from app.core.errors import ResourceNotFoundError
from app.models.tweet import Tweet
from app.models.user import User


async def list_tweets(db: AsyncSession, user_id: UserId | None = None) -> list[Tweet]:
    query = select(Tweet).order_by(Tweet.date.desc())
    if user_id is not None:
        query = query.where(Tweet.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_tweet(db: AsyncSession, tweet_id: TweetId) -> Tweet:
    tweet = await db.get(Tweet, tweet_id)
    if tweet is None:
        raise ResourceNotFoundError("Tweet", str(tweet_id))
    return tweet


async def create_tweet(db: AsyncSession, author: User, text: str) -> Tweet:
    tweet = Tweet(user_id=author.id, text=text)
    db.add(tweet)
    await db.commit()
    await db.refresh(tweet)
    return tweet
