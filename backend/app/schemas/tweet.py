"""Tweet Schemas — creation input and response view.

Invariants:
    - TweetCreate.text: 5-140 chars after stripping
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TweetCreate(BaseModel):
    text: str = Field(max_length=140)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not 5 <= len(v) <= 140:
            raise ValueError("Tweet must be between 5 and 140 characters")
        return v


class TweetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    text: str
    date: datetime
