"""
Northstar - Configuration and settings.

All settings come from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Supabase provides auth, the settings/progress tables and object storage.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str | None = None

    # Application
    northstar_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Session cookies (the cookie jar carries the Supabase tokens)
    access_token_cookie: str = "sb-access-token"
    refresh_token_cookie: str = "sb-refresh-token"
    cookie_secure: bool = True

    # Vision board image storage
    storage_bucket: str = "vision-tiles"
    signed_url_ttl_seconds: int = 3600  # 1 hour download links

    # Used when a user has no stored timezone yet
    default_timezone: str = "UTC"

    @property
    def is_development(self) -> bool:
        return self.northstar_env == "development"

    @property
    def is_production(self) -> bool:
        return self.northstar_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
