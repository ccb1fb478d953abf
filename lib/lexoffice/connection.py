"""Connection settings for the lexoffice API."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Optional

from .config import (
    DEFAULT_ACCESS_TOKEN_PATTERN,
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_MS,
    Settings,
)
from .rate_limiter import RateLimitPolicy


def is_well_formed_token(token: Optional[str], pattern: str = DEFAULT_ACCESS_TOKEN_PATTERN) -> bool:
    """Local syntactic check of an access token; no network call."""
    if not token:
        return False
    return re.fullmatch(pattern, token) is not None


@dataclass(frozen=True)
class ProxySettings:
    """HTTP(S) proxy used for all requests."""
    address: str
    port: int = 443
    secure: bool = True
    use_default_credentials: bool = True
    user: str = ""
    password: Optional[str] = field(default=None, repr=False)

    @property
    def url(self) -> str:
        """Proxy URL; a scheme already present in address is kept."""
        if self.address.startswith(("http://", "https://")):
            return f"{self.address}:{self.port}"
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.address}:{self.port}"

    @property
    def credentials(self) -> Optional[tuple]:
        if self.use_default_credentials and self.user:
            return (self.user, self.password or "")
        return None


@dataclass(frozen=True)
class ConnectionConfig:
    """Immutable connection configuration of a client.

    Use ``with_changes`` to derive a modified copy.
    """
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    access_token: Optional[str] = field(default=None, repr=False)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    proxy: Optional[ProxySettings] = None
    rate_limit: Optional[RateLimitPolicy] = None
    access_token_pattern: str = DEFAULT_ACCESS_TOKEN_PATTERN

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if not self.base_url:
            raise ValueError("base_url must not be empty")

    @property
    def root_url(self) -> str:
        """Base URL with exactly one trailing slash."""
        return self.base_url.rstrip("/") + "/"

    @property
    def api_url(self) -> str:
        """Versioned API root, e.g. https://api.lexoffice.io/v1/."""
        return f"{self.root_url}{self.api_version.strip('/')}/"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def is_access_token_valid(self) -> bool:
        return is_well_formed_token(self.access_token, self.access_token_pattern)

    def with_changes(self, **changes) -> "ConnectionConfig":
        return replace(self, **changes)

    def transport_differs(self, other: "ConnectionConfig") -> bool:
        """True when switching to ``other`` requires a new transport."""
        return (
            self.api_url != other.api_url
            or self.timeout_ms != other.timeout_ms
            or self.proxy != other.proxy
            or self.rate_limit != other.rate_limit
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionConfig":
        proxy = None
        if settings.proxy_enabled:
            proxy = ProxySettings(
                address=settings.proxy_address,
                port=settings.proxy_port,
                secure=settings.proxy_secure,
                use_default_credentials=settings.proxy_use_default_credentials,
                user=settings.proxy_user,
                password=settings.proxy_password,
            )

        rate_limit = None
        if settings.rate_limit_enabled:
            rate_limit = RateLimitPolicy(
                token_limit=settings.rate_limit_token_limit,
                tokens_per_period=settings.rate_limit_tokens_per_period,
                replenishment_period=settings.rate_limit_replenishment_period,
                queue_limit=settings.rate_limit_queue_limit,
            )

        return cls(
            base_url=settings.base_url,
            api_version=settings.api_version,
            access_token=settings.api_key or None,
            timeout_ms=settings.timeout_ms,
            proxy=proxy,
            rate_limit=rate_limit,
            access_token_pattern=settings.access_token_pattern,
        )
