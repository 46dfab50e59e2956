"""
Core data models.

`User` is the stored entity. `UserCreate` and `UserUpdate` are the request
bodies accepted by the API; the server owns `id` and the timestamps.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from userapi.core.utils import generate_id, utc_now


class User(BaseModel):
    """A user record as stored and returned by the API."""

    id: str = Field(default_factory=lambda: generate_id("user"))
    name: str
    email: EmailStr
    address: str | None = None

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class UserCreate(BaseModel):
    """Fields accepted when creating a user."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    address: str | None = None

    def to_user(self) -> User:
        return User(**self.model_dump())


class UserUpdate(BaseModel):
    """Fields accepted when updating a user. Unset fields are left alone."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    address: str | None = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def _not_null(cls, value):
        # Required on User; omit the field to leave it unchanged.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
