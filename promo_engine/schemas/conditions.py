"""
Condition tree: operator nodes ({"operator": "and"|"or", "children": [...]})
over predicate leaves tagged by "type". Keys are accepted in snake_case or
camelCase (productIds, collectionIds, segmentId, productId).
"""
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

Comparator = Literal["gte", "lte"]


class _Node(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CartTotalPredicate(_Node):
    type: Literal["cart_total"] = "cart_total"
    op: Comparator
    value: Decimal


class ItemCountPredicate(_Node):
    type: Literal["item_count"] = "item_count"
    op: Comparator
    value: int


class ProductInPredicate(_Node):
    type: Literal["product_in"] = "product_in"
    product_ids: frozenset[str]


class CollectionInPredicate(_Node):
    type: Literal["collection_in"] = "collection_in"
    collection_ids: frozenset[str]


class CustomerSegmentPredicate(_Node):
    type: Literal["customer_segment"] = "customer_segment"
    segment_id: str


class FirstPurchasePredicate(_Node):
    type: Literal["first_purchase"] = "first_purchase"


class MinQuantityPredicate(_Node):
    type: Literal["min_quantity"] = "min_quantity"
    product_id: str
    quantity: int


Predicate = Annotated[
    Union[
        CartTotalPredicate,
        ItemCountPredicate,
        ProductInPredicate,
        CollectionInPredicate,
        CustomerSegmentPredicate,
        FirstPurchasePredicate,
        MinQuantityPredicate,
    ],
    Field(discriminator="type"),
]


class OperatorNode(_Node):
    """AND/OR over children. Empty AND is true, empty OR is false."""

    operator: Literal["and", "or"]
    children: tuple["ConditionNode", ...] = ()


ConditionNode = Union[OperatorNode, Predicate]

OperatorNode.model_rebuild()

_condition_adapter: TypeAdapter[ConditionNode] = TypeAdapter(ConditionNode)


def parse_condition(raw: Any) -> ConditionNode:
    """Parse a raw JSON condition tree; unknown tags raise pydantic.ValidationError."""
    return _condition_adapter.validate_python(raw)


def always() -> OperatorNode:
    """Condition that matches every cart (vacuous AND)."""
    return OperatorNode(operator="and")
