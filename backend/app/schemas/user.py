"""User Schemas — registration/login input and public user view.

Invariants:
    - handle: 2-30 chars, stripped
    - email: well-formed, stripped and lower-cased
    - password: 6-30 chars; password2 must match on registration
    - UserResponse never carries the password hash
"""

import re
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if not _EMAIL_PATTERN.match(v):
        raise ValueError("Email is invalid")
    return v


class RegisterInput(BaseModel):
    """Registration form."""
    handle: str = Field(min_length=2, max_length=30)
    email: str = Field(max_length=255)
    password: str = Field(min_length=6, max_length=30)
    password2: str

    @field_validator("handle")
    @classmethod
    def strip_handle(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Handle must be between 2 and 30 characters")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _normalize_email(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password2:
            raise ValueError("Passwords must match")
        return self


class LoginInput(BaseModel):
    """Login form."""
    email: str = Field(max_length=255)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserResponse(BaseModel):
    """Public user view."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    email: str


class TokenResponse(BaseModel):
    success: bool = True
    token: str
