# storefront/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Mirror of an identity-provider (Clerk) user.

    Identity:
      - id: MUST match the Clerk user id (JWT "sub", e.g. "user_2abc...")

    Role:
      - "user" | "admin"
      - "guest" is represented by the absence of a token.

    Rows are upserted by the Clerk webhook and auto-provisioned on the
    first authenticated request.
    """

    __tablename__ = "users"

    id: str = Field(
        primary_key=True,
        max_length=64,
        description="Matches Clerk user id",
    )

    email: str = Field(
        default="",
        index=True,
        description="Primary email address from Clerk",
    )

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    avatar_url: str | None = None

    # Application role
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp (UTC)",
    )

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        if full_name:
            return full_name
        if self.email:
            return self.email.split("@")[0]
        return "Anonymous"
