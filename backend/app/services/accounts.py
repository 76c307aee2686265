"""Accounts Service — registration and credential checks.

Invariants:
    - Email and handle are unique across users (checked before insert, and a
      unique-constraint race on commit still reports USER_ALREADY_EXISTS)
    - Passwords are hashed before the User row is built
    - Unknown email raises ResourceNotFoundError; wrong password raises InvalidCredentialsError
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    DuplicateUserError, InvalidCredentialsError, ResourceNotFoundError,
)
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.user import LoginInput, RegisterInput

logger = logging.getLogger(__name__)


async def _taken_field(db: AsyncSession, data: RegisterInput) -> str | None:
    result = await db.execute(
        select(User).where(
            or_(User.email == data.email, User.handle == data.handle),
        ),
    )
    existing = result.scalars().first()
    if existing is None:
        return None
    return "email" if existing.email == data.email else "handle"


async def register_user(
    db: AsyncSession, data: RegisterInput, bcrypt_rounds: int = 10,
) -> User:
    """Create a user; rejects a taken email or handle."""
    taken = await _taken_field(db, data)
    if taken is not None:
        raise DuplicateUserError(taken)

    user = User(
        handle=data.handle,
        email=data.email,
        password=hash_password(data.password, bcrypt_rounds),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # a concurrent registration claimed the email or handle first
        await db.rollback()
        raise DuplicateUserError(await _taken_field(db, data) or "email or handle")
    await db.refresh(user)
    logger.info(f"Registered user {user.handle}", extra={"user_id": str(user.id)})
    return user


async def authenticate_user(db: AsyncSession, data: LoginInput) -> User:
    """Return the user whose email and password match."""
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", data.email)
    if not verify_password(data.password, user.password):
        raise InvalidCredentialsError()
    return user
