"""Runtime settings for metric instrumentation.

Values are read from ``METRICS_``-prefixed environment variables.
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_BUCKETS: List[float] = [
    0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0,
]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    SERVICE_NAME: str = "metrics-core"
    ENVIRONMENT: str = "production"

    # Histogram bounds used when a builder sets none; +Inf is appended
    DEFAULT_BUCKETS: List[float] = DEFAULT_BUCKETS

    model_config = {
        "env_prefix": "METRICS_",
        "case_sensitive": False,
    }

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize to upper case and reject unknown level names."""
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}. Must be one of {list(LOG_LEVELS)}")
        return level


_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = Settings()
    return _settings_cache


def reset_settings() -> None:
    global _settings_cache
    _settings_cache = None
