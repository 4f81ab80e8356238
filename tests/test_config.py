"""Settings, database URL normalization and logging bootstrap."""
import logging

import pytest

from promo_engine.core.config import Settings
from promo_engine.core.database import _normalized_database_url
from promo_engine.logging import setup_logging


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", "sqlite:///./promo_engine.db"),
        ("postgres://u:p@db/shop", "postgresql+psycopg://u:p@db/shop"),
        ("postgresql://u:p@db/shop", "postgresql+psycopg://u:p@db/shop"),
        ("postgresql+psycopg://u:p@db/shop", "postgresql+psycopg://u:p@db/shop"),
        (" sqlite:///:memory: ", "sqlite:///:memory:"),
    ],
)
def test_database_url_normalization(raw, expected):
    assert _normalized_database_url(raw) == expected


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SEGMENT_QUERY_BATCH_SIZE", "250")
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    s = Settings()
    assert s.segment_query_batch_size == 250
    assert s.log_level == "DEBUG"


def test_setup_logging_sets_package_level():
    setup_logging(level="DEBUG")
    assert logging.getLogger("promo_engine").level == logging.DEBUG
    setup_logging(level=logging.WARNING)
    assert logging.getLogger("promo_engine").level == logging.WARNING


def test_core_package_exposes_runtime_entry_points():
    from promo_engine import core
    from promo_engine.core import config, database

    assert core.settings is config.settings
    assert core.engine is database.engine
    assert core.init_db is database.init_db
    assert not hasattr(core, "get_db")
    assert issubclass(core.InvalidStrategyParams, core.PromotionEngineError)
