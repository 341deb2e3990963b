"""
Front-desk configuration.
Values come from environment variables prefixed with ``FRONTDESK_``
(or a ``.env`` file) and are validated by pydantic.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ledger import MIN_STAY_DAYS
from .store import DEFAULT_POINTS_PER_DISCOUNT


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_prefix='FRONTDESK_',
        env_file='.env',
        extra='ignore',
    )

    app_name: str = "Hotel Front Desk"
    # Points needed for 1% off the checkout bill.
    points_per_discount: int = Field(default=DEFAULT_POINTS_PER_DISCOUNT, gt=0)
    # JSON document rewritten after every committed change; None keeps state in memory.
    state_path: Optional[str] = None
    min_stay_days: int = Field(default=MIN_STAY_DAYS, ge=0)
    event_history_limit: int = Field(default=1000, gt=0)
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'):
            raise ValueError(f"Unknown log level {value!r}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
