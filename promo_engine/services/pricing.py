"""
Pricing pass helpers around the stacking resolver: eligibility filtering,
priority ordering, cart enrichment with collections, context lookup from the
ledger, and cart-level totals. Promotions are supplied by the caller.
"""
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import Session, select

from promo_engine.core.money import ZERO, clamp_discount
from promo_engine.models import LedgerOrder
from promo_engine.schemas.cart import Cart, CartLine, DiscountBreakdown, EvaluationContext
from promo_engine.schemas.promotion import Promotion
from promo_engine.services.segment_refresh import get_customer_segment_ids
from promo_engine.services.stacking import evaluate_promotions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartItemInput:
    """Raw cart line before collection enrichment."""

    variant_id: str
    product_id: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class PricingResult:
    discounts: list[DiscountBreakdown] = field(default_factory=list)
    total_discount: Decimal = ZERO
    free_shipping: bool = False


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def is_eligible(promotion: Promotion, now: datetime | None = None) -> bool:
    """Active, inside its time window, and under its usage limit."""
    now = _utc(now or datetime.now(timezone.utc))
    if promotion.status != "active":
        return False
    if promotion.starts_at is not None and promotion.starts_at > now:
        return False
    if promotion.ends_at is not None and promotion.ends_at < now:
        return False
    return not promotion.usage_exhausted


def build_cart(
    items: Iterable[CartItemInput],
    product_collections: Mapping[str, Iterable[str]],
    customer_id: str | None = None,
) -> Cart:
    lines = [
        CartLine(
            variant_id=i.variant_id,
            product_id=i.product_id,
            collection_ids=frozenset(product_collections.get(i.product_id, ())),
            quantity=i.quantity,
            unit_price=i.unit_price,
        )
        for i in items
    ]
    return Cart.from_lines(lines, customer_id=customer_id)


def build_context(db: Session, tenant_id: str, customer_id: str | None) -> EvaluationContext:
    """First purchase = no prior order for this tenant; segments come from materialized membership."""
    if customer_id is None:
        return EvaluationContext()
    prior_order = db.exec(
        select(LedgerOrder.id)
        .where(LedgerOrder.tenant_id == tenant_id)
        .where(LedgerOrder.customer_id == customer_id)
        .limit(1)
    ).first()
    return EvaluationContext(
        is_first_purchase=prior_order is None,
        customer_segment_ids=get_customer_segment_ids(db, tenant_id, customer_id),
    )


def price_cart(
    promotions: Iterable[Promotion],
    cart: Cart,
    ctx: EvaluationContext,
    now: datetime | None = None,
) -> PricingResult:
    candidates = [p for p in promotions if is_eligible(p, now)]
    # sorted() is stable, so equal priorities keep the caller's order
    candidates = sorted(candidates, key=lambda p: p.priority)
    discounts = evaluate_promotions(candidates, cart, ctx)
    total = clamp_discount(sum((d.discount_amount for d in discounts), ZERO), cart.subtotal)
    free_shipping = any(d.free_shipping for d in discounts)
    logger.debug(
        "Priced cart: %d candidates, %d applied, discount=%s, free_shipping=%s",
        len(candidates), len(discounts), total, free_shipping,
    )
    return PricingResult(discounts=discounts, total_discount=total, free_shipping=free_shipping)
