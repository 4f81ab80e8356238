"""
Stacking resolver: one linear pass over promotions already sorted by
ascending priority. The first accepted non-stackable promotion excludes every
later non-stackable one; stackable promotions neither block nor get blocked.
No search for the best combination is attempted.
"""
import logging
from collections.abc import Iterable
from typing import NamedTuple

from promo_engine.schemas.cart import Cart, DiscountBreakdown, EvaluationContext
from promo_engine.schemas.promotion import Promotion
from promo_engine.services.conditions import evaluate_condition
from promo_engine.services.strategies import apply_strategy

logger = logging.getLogger(__name__)


class StackState(NamedTuple):
    accepted: tuple[DiscountBreakdown, ...] = ()
    has_exclusive: bool = False  # a non-stackable promotion was accepted


def stack_step(
    state: StackState,
    promotion: Promotion,
    cart: Cart,
    ctx: EvaluationContext,
) -> StackState:
    if promotion.usage_exhausted:
        logger.debug("Skip %s: usage limit reached (%s/%s)", promotion.id, promotion.usage_count, promotion.usage_limit)
        return state
    if not evaluate_condition(promotion.condition, cart, ctx):
        logger.debug("Skip %s: condition not met", promotion.id)
        return state
    breakdown = apply_strategy(promotion, cart)
    if breakdown.is_empty:
        logger.debug("Skip %s: computes no discount", promotion.id)
        return state
    if not promotion.stackable:
        if state.has_exclusive:
            logger.debug("Skip %s: another non-stackable promotion already applies", promotion.id)
            return state
        return StackState(state.accepted + (breakdown,), True)
    return StackState(state.accepted + (breakdown,), state.has_exclusive)


def evaluate_promotions(
    promotions: Iterable[Promotion],
    cart: Cart,
    ctx: EvaluationContext,
) -> list[DiscountBreakdown]:
    """
    Resolve which promotions apply, in the given order. The caller must pass
    promotions pre-sorted by ascending priority; no reordering happens here.
    Callers sum discount_amount and OR free_shipping across the result.
    """
    if not cart.items:
        return []
    state = StackState()
    for promotion in promotions:
        state = stack_step(state, promotion, cart, ctx)
    return list(state.accepted)
