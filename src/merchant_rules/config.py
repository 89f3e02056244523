"""Engine configuration using Pydantic settings.

Every field can be overridden through ``MERCHANT_RULES_*`` environment
variables or a ``.env`` file. Specificity thresholds are nested, e.g.
``MERCHANT_RULES_SPECIFICITY__MIN_KEY_LENGTH=6``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from merchant_rules.categorization.specificity import SpecificityPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MERCHANT_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    storage_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./merchant_rules.db"
    db_echo: bool = False
    rules_storage_key: str = "merchant_rules_v1"
    storage_timeout_seconds: float = Field(5.0, gt=0)

    # Normalization
    truncation_limit: int | None = Field(50, ge=1)
    truncation_probe_length: int = Field(32, ge=1)

    # Matching; defaults to specificity.min_key_length when unset
    min_match_substring_length: int | None = Field(None, ge=1)

    specificity: SpecificityPolicy = Field(default_factory=SpecificityPolicy)

    @property
    def effective_min_match_length(self) -> int:
        if self.min_match_substring_length is not None:
            return self.min_match_substring_length
        return self.specificity.min_key_length


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
