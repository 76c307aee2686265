"""JWT Strategy — bearer-token verification for protected routes.

Invariants:
    - Strategy configured once per app from Settings (register_strategy)
    - A token is accepted only if it decodes, its user still exists, and the handle matches
    - get_current_user sets request.state.user on success, raises AuthenticationError otherwise
    - Routes that do not depend on get_current_user are never affected

Design Decisions:
    - Strategy object on app.state instead of a module global: each test app
      carries its own secret
    - Verification loads the user from the DB per request (stateless server)
"""

import logging

from fastapi import Depends, FastAPI, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.errors import AuthenticationError, ErrorContext
from app.core.security import decode_token, extract_bearer_token
from app.infrastructure.database import get_db
from app.models.user import User

logger = logging.getLogger(__name__)


class JwtStrategy:
    """Extracts the bearer token, verifies it, and resolves the user it names."""

    name = "jwt"

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def extract(self, request: Request) -> str | None:
        token = getattr(request.state, "bearer_token", None)
        if token is None:
            token = extract_bearer_token(request.headers.get("authorization"))
        return token

    async def authenticate(self, request: Request, db: AsyncSession) -> User:
        context = ErrorContext(path=request.url.path)
        token = self.extract(request)
        if not token:
            raise AuthenticationError("Missing bearer token", context)
        try:
            claims = decode_token(token, self.secret_key, self.algorithm)
        except AuthenticationError as e:
            e.context = context
            raise
        user = await db.get(User, claims.user_id)
        if user is None:
            context.user_id = str(claims.user_id)
            raise AuthenticationError("Token user no longer exists", context)
        if user.handle != claims.handle:
            context.user_id = str(user.id)
            raise AuthenticationError("Token handle does not match its user", context)
        return user


def register_strategy(app: FastAPI, settings: Settings) -> JwtStrategy:
    """Install the JWT strategy for this app."""
    strategy = JwtStrategy(settings.jwt_secret_key, settings.jwt_algorithm)
    app.state.auth_strategy = strategy
    return strategy


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_db),
) -> User:
    """FastAPI dependency guarding protected routes."""
    strategy: JwtStrategy = request.app.state.auth_strategy
    try:
        user = await strategy.authenticate(request, db)
    except AuthenticationError as e:
        logger.warning(
            f"Authentication failed: {e.message}",
            extra={"path": request.url.path, "error_code": e.code},
        )
        raise
    request.state.user = user
    return user
