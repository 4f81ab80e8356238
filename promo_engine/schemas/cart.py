"""Immutable cart snapshot, evaluation context and discount output."""
from collections.abc import Iterable
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from promo_engine.core.money import ZERO

_SNAPSHOT = ConfigDict(frozen=True)


class CartLine(BaseModel):
    model_config = _SNAPSHOT

    variant_id: str
    product_id: str
    collection_ids: frozenset[str] = frozenset()
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0, allow_inf_nan=False)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart(BaseModel):
    """Cart as seen by the engine; build with Cart.from_lines so totals stay consistent."""

    model_config = _SNAPSHOT

    items: tuple[CartLine, ...] = ()
    subtotal: Decimal = ZERO
    item_count: int = 0
    customer_id: str | None = None

    @classmethod
    def from_lines(cls, lines: Iterable[CartLine], customer_id: str | None = None) -> "Cart":
        items = tuple(lines)
        return cls(
            items=items,
            subtotal=sum((i.line_total for i in items), ZERO),
            item_count=sum(i.quantity for i in items),
            customer_id=customer_id,
        )

    @property
    def variant_ids(self) -> list[str]:
        return [i.variant_id for i in self.items]


class EvaluationContext(BaseModel):
    """Caller-resolved facts about the customer; the engine never looks these up."""

    model_config = _SNAPSHOT

    is_first_purchase: bool = False
    customer_segment_ids: frozenset[str] = frozenset()


class DiscountBreakdown(BaseModel):
    model_config = _SNAPSHOT

    promotion_id: str
    promotion_name: str
    strategy_type: str
    discount_amount: Decimal = ZERO
    free_shipping: bool = False
    affected_items: tuple[str, ...] = ()  # variant ids

    @property
    def is_empty(self) -> bool:
        return self.discount_amount == 0 and not self.free_shipping
