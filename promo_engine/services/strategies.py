"""
Strategy calculator: turns one promotion's parsed parameters into a
DiscountBreakdown for the whole cart. Amounts are Decimal, rounded half-up
to cents after each multiplication. A promotion whose strategy is unknown or
whose parameters failed to parse yields an empty breakdown instead of raising.
"""
import logging
from collections.abc import Callable
from decimal import Decimal

from promo_engine.core.money import ZERO, clamp_discount, percent_of
from promo_engine.schemas.cart import Cart, DiscountBreakdown
from promo_engine.schemas.promotion import Promotion
from promo_engine.schemas.strategy_params import (
    BundleParams,
    BuyXGetYParams,
    FixedAmountParams,
    PercentageOffParams,
    TieredParams,
)

logger = logging.getLogger(__name__)

# (amount, free_shipping, affected variant ids)
_Effect = tuple[Decimal, bool, list[str]]


def _percentage_off(params: PercentageOffParams, cart: Cart) -> _Effect:
    return percent_of(cart.subtotal, params.percentage), False, cart.variant_ids


def _fixed_amount(params: FixedAmountParams, cart: Cart) -> _Effect:
    return min(params.amount, cart.subtotal), False, cart.variant_ids


def _free_shipping(params, cart: Cart) -> _Effect:
    # Shipping is zeroed downstream
    return ZERO, True, cart.variant_ids


def _bogo(params, cart: Cart) -> _Effect:
    """Cheapest line's unit price is free; one unit only, whatever its quantity."""
    if not cart.items:
        return ZERO, False, []
    cheapest = min(cart.items, key=lambda i: i.unit_price)
    return cheapest.unit_price, False, [cheapest.variant_id]


def _buy_x_get_y(params: BuyXGetYParams, cart: Cart) -> _Effect:
    """
    Lines holding at least buy_quantity units qualify; the get_quantity
    cheapest qualifying lines each get one unit discounted by get_percentage.
    Discounts are per distinct line, not per unit.
    """
    qualifying = [i for i in cart.items if i.quantity >= params.buy_quantity]
    if not qualifying:
        return ZERO, False, []
    chosen = sorted(qualifying, key=lambda i: i.unit_price)[: params.get_quantity]
    amount = sum((percent_of(i.unit_price, params.get_percentage) for i in chosen), ZERO)
    return amount, False, [i.variant_id for i in chosen]


def _tiered(params: TieredParams, cart: Cart) -> _Effect:
    matched = [t for t in params.tiers if cart.subtotal >= t.min]
    if not matched:
        return ZERO, False, []
    tier = max(matched, key=lambda t: t.min)
    return percent_of(cart.subtotal, tier.percentage), False, cart.variant_ids


def _bundle(params: BundleParams, cart: Cart) -> _Effect:
    # Every cart line counts as part of the bundle
    return max(ZERO, cart.subtotal - params.bundle_price), False, cart.variant_ids


STRATEGIES: dict[str, Callable[..., _Effect]] = {
    "percentage_off": _percentage_off,
    "fixed_amount": _fixed_amount,
    "free_shipping": _free_shipping,
    "bogo": _bogo,
    "buy_x_get_y": _buy_x_get_y,
    "tiered": _tiered,
    "bundle": _bundle,
}


def apply_strategy(promotion: Promotion, cart: Cart) -> DiscountBreakdown:
    handler = STRATEGIES.get(promotion.strategy_type)
    params = promotion.params
    if handler is None or params is None:
        logger.debug("Promotion %s has no usable strategy (%s)", promotion.id, promotion.strategy_type)
        amount, free_shipping, affected = ZERO, False, []
    else:
        amount, free_shipping, affected = handler(params, cart)
    # Never discount more than the cart is worth
    amount = clamp_discount(amount, cart.subtotal)
    return DiscountBreakdown(
        promotion_id=promotion.id,
        promotion_name=promotion.name,
        strategy_type=promotion.strategy_type,
        discount_amount=amount,
        free_shipping=free_shipping,
        affected_items=tuple(affected),
    )
