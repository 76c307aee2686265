"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Tweets are owned by users; deleting a user deletes their tweets

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from app.models.user import User  # noqa: F401
from app.models.tweet import Tweet  # noqa: F401
from app.models.cat import Cat  # noqa: F401
