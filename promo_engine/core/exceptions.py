"""Error taxonomy for the promotion engine."""


class PromotionEngineError(Exception):
    """Base class for engine errors."""


class InvalidStrategyParams(PromotionEngineError):
    """A promotion's parameter bag does not fit its strategy type."""

    def __init__(self, strategy_type: str, detail: str):
        self.strategy_type = strategy_type
        self.detail = detail
        super().__init__(f"invalid parameters for strategy {strategy_type!r}: {detail}")


class UnknownConditionError(PromotionEngineError):
    """A condition node of an unrecognized kind reached the evaluator."""


class UnknownSegmentRuleError(PromotionEngineError):
    """A segment rule of an unrecognized kind reached the evaluator."""
