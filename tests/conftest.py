"""Pytest fixtures: in-memory SQLite ledger, fresh tables per test."""
import os
from datetime import datetime, timezone
from decimal import Decimal

import pytest

# In-memory SQLite for tests (must be set before promo_engine is imported)
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LEDGER_RETRY_WAIT", "0")

from sqlmodel import Session, SQLModel

from promo_engine.core import engine, init_db
from promo_engine.models import Customer, LedgerOrder


@pytest.fixture
def db():
    """Session on freshly created tables; everything is dropped afterwards."""
    init_db()
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def ledger(db: Session) -> Session:
    """
    Tenant t1 ledger with known aggregates:
      alice  3 orders, spent 150.00, registered 2023-01-01
      bob    1 order,  spent 200.00, registered 2024-06-01
      carol  4 orders, spent  40.00, registered 2022-01-01
      dave   no orders,              registered 2021-01-01
      erin   orders only for tenant t2, registered 2020-01-01
    plus one guest order without a customer.
    """
    customers = {
        "alice": datetime(2023, 1, 1, tzinfo=timezone.utc),
        "bob": datetime(2024, 6, 1, tzinfo=timezone.utc),
        "carol": datetime(2022, 1, 1, tzinfo=timezone.utc),
        "dave": datetime(2021, 1, 1, tzinfo=timezone.utc),
        "erin": datetime(2020, 1, 1, tzinfo=timezone.utc),
    }
    for cid, created in customers.items():
        db.add(Customer(id=cid, email=f"{cid}@example.com", created_at=created))
    db.commit()

    orders = [
        ("alice", "t1", "50.00"),
        ("alice", "t1", "60.00"),
        ("alice", "t1", "40.00"),
        ("bob", "t1", "200.00"),
        ("carol", "t1", "10.00"),
        ("carol", "t1", "10.00"),
        ("carol", "t1", "10.00"),
        ("carol", "t1", "10.00"),
        ("erin", "t2", "500.00"),
        (None, "t1", "999.00"),
    ]
    for n, (cid, tenant, total) in enumerate(orders):
        db.add(LedgerOrder(id=f"o{n}", tenant_id=tenant, customer_id=cid, total=Decimal(total)))
    db.commit()
    return db
