import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Role = Literal["admin", "superadmin"]


class LoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    username: str
    password: str


class AdminUserCreate(SQLModel):
    """
    Payload for creating a back-office account (superadmin only).
    """

    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    role: Role = "admin"

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("username must have at least 3 characters")
        return v


class AdminUserUpdate(SQLModel):
    """
    Partial update. A new password is re-hashed.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=72)
    role: Role | None = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if len(v) < 3:
            raise ValueError("username must have at least 3 characters")
        return v


class AdminUserRead(SQLModel):
    """Response schema; never carries the password hash."""

    id: uuid.UUID
    username: str
    email: str
    role: Role
    created_at: datetime
