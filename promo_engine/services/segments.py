"""
Segment rule evaluation over the historical order ledger.

Aggregations run per tenant in the database; ids are streamed back in
batches of settings.segment_query_batch_size. and/or nodes evaluate every
child and combine the resulting id sets. Nothing is written here.
"""
import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import func
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from promo_engine.core.config import settings
from promo_engine.core.exceptions import UnknownSegmentRuleError
from promo_engine.models import Customer, LedgerOrder
from promo_engine.schemas.segment_rules import (
    AndRule,
    OrderCountRule,
    OrRule,
    RegisteredBeforeRule,
    SegmentRule,
    TotalSpentRule,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _ledger_read(db: Session, query: Callable[[], T]) -> T:
    """Runs a ledger read; on OperationalError waits ledger_retry_wait and retries once."""
    try:
        return query()
    except OperationalError as e:
        logger.warning("Ledger read failed, retrying once: %s", e)
        db.rollback()
        time.sleep(settings.ledger_retry_wait)
        return query()


def _customer_ids(db: Session, stmt) -> set[str]:
    stmt = stmt.execution_options(yield_per=settings.segment_query_batch_size)
    return _ledger_read(db, lambda: set(db.exec(stmt)))


def _having(aggregate, op: str, value):
    return aggregate >= value if op == "gte" else aggregate <= value


def _tenant_customers(tenant_id: str):
    return (
        select(LedgerOrder.customer_id)
        .where(LedgerOrder.tenant_id == tenant_id)
        .where(LedgerOrder.customer_id.is_not(None))
        .group_by(LedgerOrder.customer_id)
    )


def evaluate_segment_rule(db: Session, tenant_id: str, rule: SegmentRule) -> set[str]:
    """Returns the ids of the tenant's customers matching `rule`."""
    if isinstance(rule, TotalSpentRule):
        # rounded to cents: SQLite sums NUMERIC as float
        stmt = _tenant_customers(tenant_id).having(
            _having(func.round(func.sum(LedgerOrder.total), 2), rule.op, rule.value)
        )
        return _customer_ids(db, stmt)

    if isinstance(rule, OrderCountRule):
        stmt = _tenant_customers(tenant_id).having(
            _having(func.count(LedgerOrder.id), rule.op, rule.value)
        )
        return _customer_ids(db, stmt)

    if isinstance(rule, RegisteredBeforeRule):
        # Only accounts with at least one order for this tenant qualify
        stmt = (
            select(Customer.id)
            .join(LedgerOrder, LedgerOrder.customer_id == Customer.id)
            .where(LedgerOrder.tenant_id == tenant_id)
            .where(Customer.created_at <= rule.date)
            .distinct()
        )
        return _customer_ids(db, stmt)

    if isinstance(rule, AndRule):
        results = [evaluate_segment_rule(db, tenant_id, child) for child in rule.children]
        if not results:
            return set()
        return set.intersection(*results)

    if isinstance(rule, OrRule):
        results = [evaluate_segment_rule(db, tenant_id, child) for child in rule.children]
        return set().union(*results)

    raise UnknownSegmentRuleError(f"unsupported segment rule: {type(rule).__name__}")
