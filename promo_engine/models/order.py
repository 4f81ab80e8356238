from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class LedgerOrder(SQLModel, table=True):
    """Historical order row; read-only input for segment rules and first-purchase checks."""

    __tablename__ = "ledger_order"

    id: str = Field(primary_key=True, max_length=64)
    tenant_id: str = Field(index=True, max_length=64)
    customer_id: str | None = Field(default=None, foreign_key="customer.id", index=True)  # None = guest checkout
    total: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
