"""User ORM — registered account that owns tweets.

Invariants:
    - id is UUID primary key
    - handle and email are unique; email stored lower-cased
    - password column only ever holds a bcrypt hash
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class User(Base):
    """Registered account."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    handle: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password: Mapped[str] = mapped_column(String(128), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    tweets: Mapped[list["Tweet"]] = relationship(
        "Tweet", back_populates="user",
        cascade="all, delete-orphan", lazy="noload",
    )
