"""Exceptions raised by the lexoffice client."""

from __future__ import annotations

from typing import Optional


class LexofficeError(Exception):
    """Base class for all client errors."""


class TransportError(LexofficeError):
    """Network level failure (DNS, TLS, connection refused, ...)."""


class RequestTimeoutError(TransportError):
    """The per-call deadline expired before a response arrived."""


class ApiError(LexofficeError):
    """The API answered with a status other than a success code."""

    def __init__(self, status_code: int, message: str, uri: str) -> None:
        self.status_code = status_code
        self.message = message
        self.uri = uri
        super().__init__(
            f"lexoffice API error {status_code} for {uri}: {message}"
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class DeserializationError(LexofficeError):
    """Response body did not match the expected model."""

    def __init__(self, model_name: str, detail: str, body: Optional[str] = None) -> None:
        self.model_name = model_name
        self.body = body
        super().__init__(f"Could not parse response as {model_name}: {detail}")


class TokenValidationError(LexofficeError):
    """Access token is missing or malformed.

    Never raised by the client; passed to the registered error handlers.
    """


class RateLimitExceededError(LexofficeError):
    """The rate limiter queue is full."""


class ClientNotInitializedError(LexofficeError):
    """get_client() was called before set_client()."""


class SerializationError(LexofficeError):
    """Request body contains a value that cannot be sent as JSON."""
