"""
Configuration settings for the lexoffice client.
Uses pydantic-settings for environment variable management.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://api.lexoffice.io/"
DEFAULT_API_VERSION = "v1"
DEFAULT_TIMEOUT_MS = 10000
MIN_COOL_DOWN_MS = 20

# lexoffice public API keys are 43 character url-safe strings
DEFAULT_ACCESS_TOKEN_PATTERN = r"^[A-Za-z0-9_\-]{43}$"


class Settings(BaseSettings):
    """Client settings loaded from LEXOFFICE_* environment variables."""

    # Authentication
    api_key: str = ""
    access_token_pattern: str = DEFAULT_ACCESS_TOKEN_PATTERN

    # Endpoint
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    # Proxy (disabled while proxy_address is empty)
    proxy_address: str = ""
    proxy_port: int = 443
    proxy_secure: bool = True
    proxy_use_default_credentials: bool = True
    proxy_user: str = ""
    proxy_password: Optional[str] = None

    # Rate limiting (disabled while rate_limit_token_limit is 0)
    rate_limit_token_limit: int = 0
    rate_limit_tokens_per_period: int = 1
    rate_limit_replenishment_period: float = 1.0
    rate_limit_queue_limit: int = 1000

    class Config:
        env_prefix = "LEXOFFICE_"
        env_file = ".env"
        extra = "ignore"

    @property
    def proxy_enabled(self) -> bool:
        return bool(self.proxy_address)

    @property
    def rate_limit_enabled(self) -> bool:
        return self.rate_limit_token_limit > 0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
