"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, TweetId, CatId wrap UUIDs; never use bare UUID in domain logic
    - All valid states encoded as Enums, no raw string matching
    - External id strings go through parse_uuid; malformed ids mean "no such entity"

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
TweetId = NewType("TweetId", UUID)
CatId = NewType("CatId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class ConnectionState(str, Enum):
    """Database readiness: pending until the startup connect attempt settles."""
    PENDING = "pending"
    CONNECTED = "connected"
    FAILED = "failed"


class BodyFormat(str, Enum):
    """Media types the body-parsing stages understand."""
    URLENCODED = "application/x-www-form-urlencoded"
    JSON = "application/json"


# ─── Parsing ─────────────────────────────────────────────────────

def parse_uuid(value: str) -> UUID | None:
    """UUID from an external id string; None when it is not one."""
    try:
        return UUID(str(value))
    except ValueError:
        return None
