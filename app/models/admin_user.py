import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class AdminUser(SQLModel, table=True):
    """
    Back-office account.

    Role:
      - "admin"      : manages catalog, settings and orders
      - "superadmin" : additionally manages admin accounts

    `password_hash` is a salted bcrypt hash; plaintext is never stored.
    """

    __tablename__ = "admin_users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    username: str = Field(
        max_length=50,
        unique=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    password_hash: str

    role: str = Field(
        default="admin",
        description="Application role: admin | superadmin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
