"""Application settings and configuration."""

from typing import Optional, Union

from pydantic_settings import BaseSettings, SettingsConfigDict

from arena_feed.domain.models.enums import Environment


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Arena Feed"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Upstream REST API (stub source is used when unset)
    source_base_url: Optional[str] = None
    request_timeout_seconds: float = 15.0

    # Refresh behavior
    poll_interval_seconds: float = 60.0
    trade_limit: int = 100
    decision_limit: int = 60

    # Entry cache bound (None keeps every filter context for the process lifetime)
    cache_max_entries: Optional[int] = None

    # Initial filter context
    default_environment: Environment = Environment.TESTNET
    default_account: Union[int, str] = "all"
    default_wallet: Optional[str] = None


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
