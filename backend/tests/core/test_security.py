"""Security Primitives — bcrypt hashing and JWT round trip.

Tests:
    - Hash verifies only the original password
    - Issued tokens decode to the same user id and handle
    - Expired, tampered, and foreign-secret tokens raise AuthenticationError
    - Bearer extraction is scheme-insensitive and ignores other schemes
"""

from uuid import uuid4

import jwt
import pytest

from app.core.domain_types import UserId
from app.core.errors import AuthenticationError
from app.core.security import (
    decode_token, extract_bearer_token, hash_password, issue_token, verify_password,
)


def test_password_hash_verifies_original_only():
    hashed = hash_password("secret1", rounds=4)
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_verify_against_non_bcrypt_value_is_false():
    assert not verify_password("secret1", "plaintext")


def test_token_round_trip():
    uid = UserId(uuid4())
    token = issue_token(uid, "alice", "k")
    claims = decode_token(token, "k")
    assert claims.user_id == uid
    assert claims.handle == "alice"


def test_expired_token_rejected():
    token = issue_token(UserId(uuid4()), "alice", "k", expires_in=-10)
    with pytest.raises(AuthenticationError, match="expired"):
        decode_token(token, "k")


def test_wrong_secret_rejected():
    token = issue_token(UserId(uuid4()), "alice", "k")
    with pytest.raises(AuthenticationError) as exc:
        decode_token(token, "other")
    assert exc.value.http_status == 401


def test_token_without_id_claim_rejected():
    token = jwt.encode({"handle": "x", "exp": 9999999999}, "k", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        decode_token(token, "k")


def test_token_with_malformed_id_rejected():
    token = jwt.encode({"id": "nope", "exp": 9999999999}, "k", algorithm="HS256")
    with pytest.raises(AuthenticationError, match="payload"):
        decode_token(token, "k")


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("BEARER   abc  ", "abc"),
    ("Basic abc", None),
    ("Bearer", None),
    ("", None),
    (None, None),
])
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected
