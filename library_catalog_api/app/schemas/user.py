"""
Pydantic models for user data.

Users carry no password: every account logs in with the shared secret
configured as ``LOGIN_PASSWORD``.
"""

from typing import Optional

from pydantic import BaseModel, Field

USERNAME_MIN_LENGTH = 3


class UserCreate(BaseModel):
    """Schema for registering a user."""

    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, example="alice")
    favorite_genre: Optional[str] = Field(None, example="scifi")


class UserRead(BaseModel):
    """Schema for reading a user."""

    id: int
    username: str
    favorite_genre: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class TokenRead(BaseModel):
    """A signed bearer token issued by ``login``."""

    value: str
