"""GraphQL Schema — strawberry types, queries, and mutations over users, tweets, and cats.

Invariants:
    - Resolvers read the request-scoped AsyncSession from info.context["db"]
    - Unknown or malformed ids resolve to null, never raise
    - The User type has no password field

Design Decisions:
    - Plain conversion classmethods (from_model) over strawberry-sqlalchemy mappers:
      three small types, no extra dependency
"""

from datetime import datetime

import strawberry
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.types import Info

from app.core.domain_types import CatId, TweetId, UserId, parse_uuid
from app.models.cat import Cat
from app.models.tweet import Tweet
from app.models.user import User


def _db(info: Info) -> AsyncSession:
    return info.context["db"]


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    handle: str
    email: str
    date: datetime

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(
            id=strawberry.ID(str(user.id)),
            handle=user.handle, email=user.email, date=user.date,
        )


@strawberry.type(name="Tweet")
class TweetType:
    id: strawberry.ID
    user_id: strawberry.ID
    text: str
    date: datetime

    @classmethod
    def from_model(cls, tweet: Tweet) -> "TweetType":
        return cls(
            id=strawberry.ID(str(tweet.id)),
            user_id=strawberry.ID(str(tweet.user_id)),
            text=tweet.text, date=tweet.date,
        )


@strawberry.type(name="Cat")
class CatType:
    id: strawberry.ID
    name: str
    age: int | None
    date: datetime

    @classmethod
    def from_model(cls, cat: Cat) -> "CatType":
        return cls(
            id=strawberry.ID(str(cat.id)),
            name=cat.name, age=cat.age, date=cat.date,
        )


@strawberry.type
class Query:
    @strawberry.field
    async def users(self, info: Info) -> list[UserType]:
        result = await _db(info).execute(select(User).order_by(User.date))
        return [UserType.from_model(u) for u in result.scalars().all()]

    @strawberry.field
    async def user(self, info: Info, id: strawberry.ID) -> UserType | None:
        user_id = parse_uuid(id)
        if user_id is None:
            return None
        user = await _db(info).get(User, UserId(user_id))
        return UserType.from_model(user) if user else None

    @strawberry.field
    async def tweets(self, info: Info) -> list[TweetType]:
        result = await _db(info).execute(
            select(Tweet).order_by(Tweet.date.desc()),
        )
        return [TweetType.from_model(t) for t in result.scalars().all()]

    @strawberry.field
    async def tweet(self, info: Info, id: strawberry.ID) -> TweetType | None:
        tweet_id = parse_uuid(id)
        if tweet_id is None:
            return None
        tweet = await _db(info).get(Tweet, TweetId(tweet_id))
        return TweetType.from_model(tweet) if tweet else None

    @strawberry.field
    async def cats(self, info: Info) -> list[CatType]:
        result = await _db(info).execute(select(Cat).order_by(Cat.date))
        return [CatType.from_model(c) for c in result.scalars().all()]

    @strawberry.field
    async def cat(self, info: Info, id: strawberry.ID) -> CatType | None:
        cat_id = parse_uuid(id)
        if cat_id is None:
            return None
        cat = await _db(info).get(Cat, CatId(cat_id))
        return CatType.from_model(cat) if cat else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_cat(
        self, info: Info, name: str, age: int | None = None,
    ) -> CatType:
        name = name.strip()
        if not 1 <= len(name) <= 100:
            raise ValueError("Cat name must be between 1 and 100 characters")
        if age is not None and age < 0:
            raise ValueError("Cat age cannot be negative")
        db = _db(info)
        cat = Cat(name=name, age=age)
        db.add(cat)
        await db.commit()
        await db.refresh(cat)
        return CatType.from_model(cat)


schema = strawberry.Schema(query=Query, mutation=Mutation)
