"""Security Primitives — bcrypt password hashing and JWT issue/verify.

Invariants:
    - Plain passwords never leave this module in any form other than a bcrypt hash
    - Tokens carry id, handle, iat, exp and nothing else
    - Every decode failure surfaces as AuthenticationError (never a PyJWT exception)

Design Decisions:
    - Functions take secret/algorithm explicitly: no settings import, trivially testable
    - Passwords truncated to 72 bytes before hashing: bcrypt's hard input limit
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from app.core.domain_types import UserId
from app.core.errors import AuthenticationError

_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a bearer token."""
    user_id: UserId
    handle: str


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            _password_bytes(password), hashed_password.encode("utf-8"),
        )
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def issue_token(
    user_id: UserId,
    handle: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_in: int = 3600,
) -> str:
    """Create a signed JWT for the given user."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(user_id),
        "handle": handle,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_token(
    token: str, secret_key: str, algorithm: str = "HS256",
) -> TokenClaims:
    """Verify signature and expiry, then extract the claims."""
    try:
        payload = jwt.decode(
            token, secret_key, algorithms=[algorithm],
            options={"require": ["id", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}")
    try:
        user_id = UserId(UUID(str(payload["id"])))
    except ValueError:
        raise AuthenticationError("Invalid token payload")
    return TokenClaims(
        user_id=user_id,
        handle=str(payload.get("handle", "")),
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Token from an 'Authorization: Bearer <token>' header (scheme case-insensitive)."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
