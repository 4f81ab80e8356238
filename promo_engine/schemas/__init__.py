from .cart import Cart, CartLine, DiscountBreakdown, EvaluationContext
from .conditions import ConditionNode, OperatorNode, parse_condition
from .promotion import Promotion, load_promotion
from .segment_rules import SegmentRule, parse_segment_rule

__all__ = [
    "Cart",
    "CartLine",
    "ConditionNode",
    "DiscountBreakdown",
    "EvaluationContext",
    "OperatorNode",
    "Promotion",
    "SegmentRule",
    "load_promotion",
    "parse_condition",
    "parse_segment_rule",
]
