"""Promotion & discount evaluation engine for a multi-tenant storefront."""
from promo_engine.schemas import (
    Cart,
    CartLine,
    DiscountBreakdown,
    EvaluationContext,
    Promotion,
    load_promotion,
)
from promo_engine.services.pricing import PricingResult, price_cart
from promo_engine.services.stacking import evaluate_promotions

__all__ = [
    "Cart",
    "CartLine",
    "DiscountBreakdown",
    "EvaluationContext",
    "PricingResult",
    "Promotion",
    "evaluate_promotions",
    "load_promotion",
    "price_cart",
]
