"""
Segment rules: recursive tagged union evaluated against the order ledger.
total_spent / order_count aggregate per customer, registered_before filters
accounts, and / or combine child results by intersection / union.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

Comparator = Literal["gte", "lte"]


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TotalSpentRule(_Rule):
    type: Literal["total_spent"] = "total_spent"
    op: Comparator
    value: Decimal


class OrderCountRule(_Rule):
    type: Literal["order_count"] = "order_count"
    op: Comparator
    value: int


class RegisteredBeforeRule(_Rule):
    type: Literal["registered_before"] = "registered_before"
    date: datetime

    @field_validator("date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        # Ledger timestamps are timezone-aware UTC; a bare date means UTC midnight
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class AndRule(_Rule):
    type: Literal["and"] = "and"
    children: tuple["SegmentRule", ...] = ()


class OrRule(_Rule):
    type: Literal["or"] = "or"
    children: tuple["SegmentRule", ...] = ()


SegmentRule = Annotated[
    Union[TotalSpentRule, OrderCountRule, RegisteredBeforeRule, AndRule, OrRule],
    Field(discriminator="type"),
]

AndRule.model_rebuild()
OrRule.model_rebuild()

_rule_adapter: TypeAdapter[SegmentRule] = TypeAdapter(SegmentRule)


def parse_segment_rule(raw: Any) -> SegmentRule:
    """Parse a stored rules document; unknown tags raise pydantic.ValidationError."""
    return _rule_adapter.validate_python(raw)
