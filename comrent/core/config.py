from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "ComRent"
    APP_ENV: str = "dev"
    HOST: str = "0.0.0.0"
    PORT: int = 8089
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")

    # Seeded registry contents; everything is rebuilt from these on restart.
    SEED_UNIT_COUNT: int = 12
    UNIT_NAME_PREFIX: str = "PC"

    NOTIFICATION_LIMIT: int = 50
    CUSTOMER_POLL_SECONDS: float = 1.0
    ADMIN_POLL_SECONDS: float = 5.0

    COMPANY_NAME: str = "ComRent"
    CURRENCY_SYMBOL: str = "₱"

    # Leave MAILER_API_KEY empty to simulate delivery in development.
    MAILER_API_URL: str = "https://api.resend.com/emails"
    MAILER_API_KEY: str = ""
    MAILER_FROM_ADDRESS: str = "ComRent <onboarding@resend.dev>"
    MAILER_TIMEOUT_SECONDS: float = 10.0

    @field_validator("SEED_UNIT_COUNT", "NOTIFICATION_LIMIT")
    @classmethod
    def non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be zero or greater")
        return value

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() in {"prod", "production"}

    @property
    def sessions_dir(self) -> Path:
        return self.DATA_DIR / "sessions"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()


def reset_settings_cache() -> None:
    """Clear the cached settings (tests tweak the environment between runs)."""

    get_settings.cache_clear()


settings = get_settings()
