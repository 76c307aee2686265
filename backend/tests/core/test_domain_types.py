"""Domain Types — identity wrappers and enum values.

Tests:
    - NewType wrappers exist and are callable
    - ConnectionState covers exactly pending/connected/failed
    - BodyFormat values are the media types the parsers match on
    - parse_uuid maps malformed id strings to None
"""

from uuid import uuid4

from app.core.domain_types import (
    BodyFormat, CatId, ConnectionState, TweetId, UserId, parse_uuid,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert UserId(uid) == uid
    assert TweetId(uid) == uid
    assert CatId(uid) == uid


def test_connection_state_has_three_states():
    assert {s.value for s in ConnectionState} == {"pending", "connected", "failed"}


def test_body_formats_are_media_types():
    assert BodyFormat.JSON.value == "application/json"
    assert BodyFormat.URLENCODED.value == "application/x-www-form-urlencoded"


def test_parse_uuid_accepts_uuid_strings_only():
    uid = uuid4()
    assert parse_uuid(str(uid)) == uid
    assert parse_uuid("not-an-id") is None
    assert parse_uuid("") is None
