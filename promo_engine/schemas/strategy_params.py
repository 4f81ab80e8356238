"""One parameter model per discount strategy, validated once at load time."""
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from promo_engine.core.exceptions import InvalidStrategyParams


class _Params(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PercentageOffParams(_Params):
    percentage: Decimal = Field(ge=0, le=100, allow_inf_nan=False)


class FixedAmountParams(_Params):
    amount: Decimal = Field(ge=0, allow_inf_nan=False)


class FreeShippingParams(_Params):
    pass


class BogoParams(_Params):
    pass


class BuyXGetYParams(_Params):
    buy_quantity: int = Field(default=2, ge=1)
    get_quantity: int = Field(default=1, ge=0)
    get_percentage: Decimal = Field(default=Decimal("100"), ge=0, le=100, allow_inf_nan=False)  # 100 = free


class Tier(_Params):
    min: Decimal = Field(ge=0, allow_inf_nan=False)
    percentage: Decimal = Field(ge=0, le=100, allow_inf_nan=False)


class TieredParams(_Params):
    tiers: tuple[Tier, ...] = ()


class BundleParams(_Params):
    bundle_price: Decimal = Field(ge=0, allow_inf_nan=False)


StrategyParams = (
    PercentageOffParams
    | FixedAmountParams
    | FreeShippingParams
    | BogoParams
    | BuyXGetYParams
    | TieredParams
    | BundleParams
)

STRATEGY_PARAMS: dict[str, type[_Params]] = {
    "percentage_off": PercentageOffParams,
    "fixed_amount": FixedAmountParams,
    "free_shipping": FreeShippingParams,
    "bogo": BogoParams,
    "buy_x_get_y": BuyXGetYParams,
    "tiered": TieredParams,
    "bundle": BundleParams,
}


def parse_strategy_params(strategy_type: str, raw: dict[str, Any] | None) -> StrategyParams:
    model = STRATEGY_PARAMS.get(strategy_type)
    if model is None:
        raise InvalidStrategyParams(strategy_type, "unknown strategy type")
    try:
        return model.model_validate(raw or {})
    except ValidationError as e:
        raise InvalidStrategyParams(strategy_type, str(e)) from e
