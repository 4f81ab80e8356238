from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# .env at the project root: promo_engine/core/config.py -> core -> promo_engine -> root
_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _ROOT / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./promo_engine.db"
    log_level: str = "INFO"
    # Rows fetched per round-trip when streaming segment member ids
    segment_query_batch_size: int = Field(default=1000, ge=1)
    # Seconds to wait before the single retry of a failed ledger read
    ledger_retry_wait: float = Field(default=1.5, ge=0)

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE.is_file() else ".env",
        "extra": "ignore",
    }

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str:
        return (v or "INFO").strip().upper()


settings = Settings()
