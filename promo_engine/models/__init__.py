from .customer import Customer
from .order import LedgerOrder
from .segment import CustomerSegment, SegmentMembership

__all__ = [
    "Customer",
    "CustomerSegment",
    "LedgerOrder",
    "SegmentMembership",
]
