from .config import Settings, settings
from .database import DATABASE_URL, engine, init_db
from .exceptions import (
    InvalidStrategyParams,
    PromotionEngineError,
    UnknownConditionError,
    UnknownSegmentRuleError,
)

__all__ = [
    "DATABASE_URL",
    "InvalidStrategyParams",
    "PromotionEngineError",
    "Settings",
    "UnknownConditionError",
    "UnknownSegmentRuleError",
    "engine",
    "init_db",
    "settings",
]
