#!/usr/bin/env python3
"""Re-materializes customer segment membership. From the project root: python3 scripts/refresh_segments.py [tenant_id]"""
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parent.parent
load_dotenv(ROOT / ".env")

from sqlmodel import Session  # noqa: E402

from promo_engine.core import engine, init_db, settings  # noqa: E402
from promo_engine.logging import setup_logging  # noqa: E402
from promo_engine.services.segment_refresh import refresh_segments  # noqa: E402

log = logging.getLogger("promo_engine.jobs")


def main(argv: list[str]) -> int:
    setup_logging(level=settings.log_level)
    init_db()
    tenant_id = argv[1] if len(argv) > 1 else None
    with Session(engine) as db:
        results = refresh_segments(db, tenant_id=tenant_id)
    failed = [r for r in results if r.status == "failed"]
    log.info(
        "Segment refresh done: %d refreshed, %d skipped, %d failed",
        sum(1 for r in results if r.status == "refreshed"),
        sum(1 for r in results if r.status == "skipped"),
        len(failed),
    )
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
