from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Customer(SQLModel, table=True):
    """Customer account; accounts are shared across tenants."""

    id: str = Field(primary_key=True, max_length=64)
    email: str | None = Field(default=None, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        index=True,
    )
