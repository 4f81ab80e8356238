import logging
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel

from promo_engine.core.exceptions import InvalidStrategyParams
from promo_engine.schemas.conditions import ConditionNode, always
from promo_engine.schemas.strategy_params import StrategyParams, parse_strategy_params

logger = logging.getLogger(__name__)

PromotionType = Literal["coupon", "automatic", "flash_sale"]
PromotionStatus = Literal["active", "scheduled", "expired", "disabled"]


class Promotion(BaseModel):
    """
    Discount rule as handed to the engine. The raw strategy_params bag is parsed
    once on construction; a bag that does not fit the strategy leaves `params`
    as None and the promotion computes a zero discount.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    tenant_id: str
    name: str
    description: str | None = None
    type: PromotionType = "automatic"
    status: PromotionStatus = "active"
    priority: int = 0  # lower runs first
    stackable: bool = False
    strategy_type: str
    strategy_params: dict[str, Any] = Field(default_factory=dict)
    condition: ConditionNode = Field(
        default_factory=always,
        validation_alias=AliasChoices("condition", "conditions"),
    )
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    usage_limit: int | None = Field(default=None, ge=0)  # None = unlimited
    usage_count: int = Field(default=0, ge=0)

    _params: StrategyParams | None = PrivateAttr(default=None)
    _params_error: InvalidStrategyParams | None = PrivateAttr(default=None)

    @field_validator("starts_at", "ends_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def model_post_init(self, __context: Any) -> None:
        try:
            self._params = parse_strategy_params(self.strategy_type, self.strategy_params)
        except InvalidStrategyParams as e:
            self._params_error = e
            logger.warning("Promotion %s will not discount: %s", self.id, e)

    @property
    def params(self) -> StrategyParams | None:
        return self._params

    @property
    def usage_exhausted(self) -> bool:
        return self.usage_limit is not None and self.usage_count >= self.usage_limit


def load_promotion(data: dict[str, Any]) -> Promotion:
    """Strict loader for admin writes: raises InvalidStrategyParams instead of degrading."""
    promotion = Promotion.model_validate(data)
    if promotion._params_error is not None:
        raise promotion._params_error
    return promotion
