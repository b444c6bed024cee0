# apps/cashback/utils/settings.py
"""Relay settings loaded from environment variables (and an optional .env file)."""
from typing import List, Literal, Optional

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    SUPABASE_BUSINESS_TABLE: str = Field(default="subscribers", min_length=1)

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    CASHBACK_CURRENCY: str = Field(default="usd", pattern=r"^[A-Za-z]{3}$")

    # Dashboard
    RECENT_TRANSACTIONS_LIMIT: PositiveInt = 10

    # HTTP
    CORS_MODE: Literal["open", "allowlist"] = "open"
    CORS_ALLOW_ORIGINS: str = Field(default="", description="comma-separated")
    PORT: int = Field(default=3001, gt=0, le=65535)

    LOG_LEVEL: str = "INFO"
    CASHBACK_VERSION: str = "1.0.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("CASHBACK_CURRENCY", "CORS_MODE", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @property
    def cors_allow_origins_list(self) -> List[str]:
        return [x.strip() for x in self.CORS_ALLOW_ORIGINS.split(",") if x.strip()]


settings = Settings()
