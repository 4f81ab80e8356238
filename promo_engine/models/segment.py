from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


class CustomerSegment(SQLModel, table=True):
    """Named customer set; membership is materialized by the refresh job."""

    __tablename__ = "customer_segment"

    id: str = Field(primary_key=True, max_length=64)
    tenant_id: str = Field(index=True, max_length=64)
    name: str = Field(max_length=200)
    description: str | None = None
    rules: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))  # raw SegmentRule tree
    member_count: int = 0
    last_refreshed_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))


class SegmentMembership(SQLModel, table=True):
    __tablename__ = "segment_membership"

    segment_id: str = Field(foreign_key="customer_segment.id", primary_key=True)
    customer_id: str = Field(foreign_key="customer.id", primary_key=True, index=True)
