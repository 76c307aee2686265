"""Users Route Group — registration, login, and the authenticated profile.

Invariants:
    - Bodies come from the pipeline's parsed_body (JSON or URL-encoded alike)
    - register/login answer {"success": true, "token": "Bearer <jwt>"}
    - /current is the only protected route here
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import parsed_body
from app.config import Settings
from app.core.security import issue_token
from app.infrastructure.auth import get_current_user
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.user import LoginInput, RegisterInput, TokenResponse, UserResponse
from app.services.accounts import authenticate_user, register_user

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


def _token_for(user: User, settings: Settings) -> TokenResponse:
    token = issue_token(
        user.id, user.handle,
        settings.jwt_secret_key, settings.jwt_algorithm,
        settings.jwt_expires_seconds,
    )
    return TokenResponse(token=f"Bearer {token}")


@router.get("/test")
async def users_test():
    return {"msg": "This is the users route"}


@router.post("/register", response_model=TokenResponse)
async def register(
    request: Request,
    body: RegisterInput = Depends(parsed_body(RegisterInput)),
    db: AsyncSession = Depends(get_db),
):
    """Create an account and sign the new user in."""
    settings: Settings = request.app.state.settings
    user = await register_user(db, body, settings.bcrypt_rounds)
    return _token_for(user, settings)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    body: LoginInput = Depends(parsed_body(LoginInput)),
    db: AsyncSession = Depends(get_db),
):
    """Exchange email and password for a bearer token."""
    user = await authenticate_user(db, body)
    logger.info(f"User {user.handle} logged in", extra={"user_id": str(user.id)})
    return _token_for(user, request.app.state.settings)


@router.get("/current", response_model=UserResponse)
async def current(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
