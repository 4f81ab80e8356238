"""Condition tree evaluation against a cart snapshot. Pure, no I/O."""
from decimal import Decimal

from promo_engine.core.exceptions import UnknownConditionError
from promo_engine.schemas.cart import Cart, EvaluationContext
from promo_engine.schemas.conditions import (
    CartTotalPredicate,
    CollectionInPredicate,
    ConditionNode,
    CustomerSegmentPredicate,
    FirstPurchasePredicate,
    ItemCountPredicate,
    MinQuantityPredicate,
    OperatorNode,
    ProductInPredicate,
)


def _compare(actual: Decimal | int, op: str, value: Decimal | int) -> bool:
    if op == "gte":
        return actual >= value
    return actual <= value


def evaluate_condition(node: ConditionNode, cart: Cart, ctx: EvaluationContext) -> bool:
    if isinstance(node, OperatorNode):
        results = [evaluate_condition(child, cart, ctx) for child in node.children]
        if node.operator == "and":
            return all(results)
        return any(results)
    return evaluate_predicate(node, cart, ctx)


def evaluate_predicate(pred: ConditionNode, cart: Cart, ctx: EvaluationContext) -> bool:
    """
    Predicates gate applicability only; matching one product does not narrow
    what the strategy later discounts.
    """
    if isinstance(pred, CartTotalPredicate):
        return _compare(cart.subtotal, pred.op, pred.value)
    if isinstance(pred, ItemCountPredicate):
        return _compare(cart.item_count, pred.op, pred.value)
    if isinstance(pred, ProductInPredicate):
        return any(i.product_id in pred.product_ids for i in cart.items)
    if isinstance(pred, CollectionInPredicate):
        return any(not pred.collection_ids.isdisjoint(i.collection_ids) for i in cart.items)
    if isinstance(pred, CustomerSegmentPredicate):
        return pred.segment_id in ctx.customer_segment_ids
    if isinstance(pred, FirstPurchasePredicate):
        return ctx.is_first_purchase
    if isinstance(pred, MinQuantityPredicate):
        # per line, quantities of the same product on separate lines are not summed
        return any(
            i.product_id == pred.product_id and i.quantity >= pred.quantity
            for i in cart.items
        )
    raise UnknownConditionError(f"unsupported condition node: {type(pred).__name__}")
