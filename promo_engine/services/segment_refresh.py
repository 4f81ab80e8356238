"""
Materializes segment membership from stored rules.

Each refresh replaces a segment's membership wholesale inside one
transaction, with the segment row locked, so concurrent refreshes of the same
segment end as last-writer-wins rather than a mix of partial sets. Pricing
reads the materialized membership; it never evaluates rules live.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from promo_engine.models import CustomerSegment, SegmentMembership
from promo_engine.schemas.segment_rules import parse_segment_rule
from promo_engine.services.segments import evaluate_segment_rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentRefreshResult:
    segment_id: str
    status: str  # "refreshed" | "skipped" | "failed"
    member_count: int = 0
    refreshed_at: datetime | None = None
    detail: str | None = None


def refresh_segment(db: Session, segment: CustomerSegment, now: datetime | None = None) -> SegmentRefreshResult:
    """
    Re-evaluates one segment and atomically swaps in the new member set.
    Rules are read from the locked row, not from the passed-in object.
    Malformed rules raise pydantic.ValidationError before anything is written.
    """
    locked = db.exec(
        select(CustomerSegment)
        .where(CustomerSegment.id == segment.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).one()
    segment_id = locked.id
    rule = parse_segment_rule(locked.rules)
    customer_ids = evaluate_segment_rule(db, locked.tenant_id, rule)
    refreshed_at = now or datetime.now(timezone.utc)

    stale = db.exec(select(SegmentMembership).where(SegmentMembership.segment_id == segment_id))
    for membership in stale:
        db.delete(membership)
    db.flush()
    db.add_all(
        SegmentMembership(segment_id=segment_id, customer_id=cid) for cid in sorted(customer_ids)
    )
    locked.member_count = len(customer_ids)
    locked.last_refreshed_at = refreshed_at
    db.add(locked)
    db.commit()

    logger.info("Segment %s refreshed: %d members", segment_id, len(customer_ids))
    return SegmentRefreshResult(
        segment_id=segment_id,
        status="refreshed",
        member_count=len(customer_ids),
        refreshed_at=refreshed_at,
    )


def refresh_segments(db: Session, tenant_id: str | None = None) -> list[SegmentRefreshResult]:
    """Refreshes every stored segment (optionally one tenant's); one failure does not stop the rest."""
    stmt = select(CustomerSegment).order_by(CustomerSegment.tenant_id, CustomerSegment.id)
    if tenant_id is not None:
        stmt = stmt.where(CustomerSegment.tenant_id == tenant_id)
    segments = list(db.exec(stmt).all())

    results: list[SegmentRefreshResult] = []
    for segment in segments:
        segment_id = segment.id
        if not segment.rules:
            logger.warning("Segment %s has no rules, skipped", segment_id)
            results.append(SegmentRefreshResult(segment_id, "skipped", detail="no rules"))
            continue
        try:
            results.append(refresh_segment(db, segment))
        except ValidationError as e:
            db.rollback()
            logger.warning("Segment %s has malformed rules, skipped: %s", segment_id, e)
            results.append(SegmentRefreshResult(segment_id, "skipped", detail="malformed rules"))
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Segment %s refresh failed", segment_id)
            results.append(SegmentRefreshResult(segment_id, "failed", detail=str(e)))
    return results


def get_customer_segment_ids(db: Session, tenant_id: str, customer_id: str) -> frozenset[str]:
    """Materialized segment ids for one customer within one tenant, as used in an EvaluationContext."""
    rows = db.exec(
        select(SegmentMembership.segment_id)
        .join(CustomerSegment, CustomerSegment.id == SegmentMembership.segment_id)
        .where(CustomerSegment.tenant_id == tenant_id)
        .where(SegmentMembership.customer_id == customer_id)
    )
    return frozenset(rows)
