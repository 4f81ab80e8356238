"""Strategy calculator: amounts, rounding and degraded parameters."""
from decimal import Decimal

import pytest

from factories import cart, line, promotion, promotion_data
from promo_engine.core.exceptions import InvalidStrategyParams
from promo_engine.schemas.promotion import load_promotion
from promo_engine.services.strategies import apply_strategy


@pytest.mark.parametrize(
    "unit_price, percentage, expected",
    [
        ("19.995", 10, "2.00"),
        ("0.05", 10, "0.01"),  # 0.005 rounds half up
        ("10.05", 10, "1.01"),  # 1.005
        ("10.04", 10, "1.00"),  # 1.004
        ("100.00", 0, "0.00"),
        ("100.00", 100, "100.00"),
    ],
)
def test_percentage_off_rounds_half_up(unit_price, percentage, expected):
    c = cart(line("v1", unit_price))
    result = apply_strategy(promotion(strategy_params={"percentage": percentage}), c)
    assert result.discount_amount == Decimal(expected)
    assert result.free_shipping is False


def test_percentage_off_covers_whole_cart():
    c = cart(line("v1", "10"), line("v2", "20", 2))
    result = apply_strategy(promotion(strategy_params={"percentage": 10}), c)
    assert result.discount_amount == Decimal("5.00")
    assert result.affected_items == ("v1", "v2")


def test_fixed_amount_never_exceeds_subtotal():
    c = cart(line("v1", "30.00"))
    assert apply_strategy(promotion("fixed_amount", strategy_params={"amount": 50}), c).discount_amount == Decimal("30.00")
    assert apply_strategy(promotion("fixed_amount", strategy_params={"amount": "12.5"}), c).discount_amount == Decimal("12.50")


def test_free_shipping_has_no_amount():
    result = apply_strategy(promotion("free_shipping"), cart(line("v1", "30.00")))
    assert result.discount_amount == 0
    assert result.free_shipping is True
    assert result.affected_items == ("v1",)


def test_bogo_discounts_one_unit_of_cheapest_line():
    result = apply_strategy(promotion("bogo"), cart(line("v1", "10.00", 3)))
    assert result.discount_amount == Decimal("10.00")
    assert result.affected_items == ("v1",)

    result = apply_strategy(promotion("bogo"), cart(line("v1", "25.00"), line("v2", "7.50", 2)))
    assert result.discount_amount == Decimal("7.50")
    assert result.affected_items == ("v2",)


def test_bogo_on_empty_cart():
    result = apply_strategy(promotion("bogo"), cart())
    assert result.discount_amount == 0
    assert result.affected_items == ()


@pytest.fixture
def multi_line_cart():
    return cart(
        line("cheap", "5.00", 2),
        line("mid", "8.00", 3),
        line("single", "1.00", 1),
    )


def test_buy_x_get_y_discounts_cheapest_qualifying_lines(multi_line_cart):
    p = promotion("buy_x_get_y", strategy_params={"buy_quantity": 2, "get_quantity": 1, "get_percentage": 50})
    result = apply_strategy(p, multi_line_cart)
    assert result.discount_amount == Decimal("2.50")
    assert result.affected_items == ("cheap",)

    p = promotion("buy_x_get_y", strategy_params={"buyQuantity": 2, "getQuantity": 5})
    result = apply_strategy(p, multi_line_cart)
    assert result.discount_amount == Decimal("13.00")  # one unit per line, free
    assert result.affected_items == ("cheap", "mid")


def test_buy_x_get_y_without_qualifying_lines(multi_line_cart):
    p = promotion("buy_x_get_y", strategy_params={"buy_quantity": 4})
    result = apply_strategy(p, multi_line_cart)
    assert result.discount_amount == 0
    assert result.affected_items == ()


def test_tiered_selects_highest_reached_tier():
    tiers = {"tiers": [{"min": 50, "percentage": 10}, {"min": 100, "percentage": 15}]}
    p = promotion("tiered", strategy_params=tiers)
    assert apply_strategy(p, cart(line("v1", "100.00"))).discount_amount == Decimal("15.00")
    assert apply_strategy(p, cart(line("v1", "99.99"))).discount_amount == Decimal("10.00")
    below = apply_strategy(p, cart(line("v1", "49.99")))
    assert below.discount_amount == 0
    assert below.affected_items == ()


def test_bundle_discounts_down_to_bundle_price():
    c = cart(line("v1", "70.00"), line("v2", "50.00"))
    assert apply_strategy(promotion("bundle", strategy_params={"bundle_price": 100}), c).discount_amount == Decimal("20.00")
    assert apply_strategy(promotion("bundle", strategy_params={"bundlePrice": 150}), c).discount_amount == 0


@pytest.mark.parametrize(
    "strategy_type, params",
    [
        ("percentage_off", {}),
        ("percentage_off", {"percentage": "NaN"}),
        ("percentage_off", {"percentage": 150}),
        ("fixed_amount", {"amount": "lots"}),
        ("bundle", {}),
        ("tiered", {"tiers": [{"min": 10}]}),
        ("mystery_box", {"percentage": 10}),
    ],
)
def test_malformed_promotions_degrade_to_zero(strategy_type, params):
    p = promotion(strategy_type, strategy_params=params)
    assert p.params is None
    result = apply_strategy(p, cart(line("v1", "80.00")))
    assert result.discount_amount == 0
    assert result.free_shipping is False
    assert result.affected_items == ()


def test_strict_loader_rejects_malformed_params():
    with pytest.raises(InvalidStrategyParams) as exc:
        load_promotion(promotion_data("fixed_amount", strategy_params={}))
    assert exc.value.strategy_type == "fixed_amount"
    assert load_promotion(promotion_data("fixed_amount", strategy_params={"amount": 5})).params.amount == Decimal("5")
