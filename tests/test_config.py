"""Tests for settings, connection configuration and the executor seam."""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from lexoffice import (
    ConnectionConfig,
    LexofficeClient,
    ProxySettings,
    RateLimitPolicy,
    get_settings,
    is_well_formed_token,
    load_credentials,
)
from lexoffice.config import DEFAULT_BASE_URL
from lexoffice.executor import HttpxRequestExecutor

from factories import API_URL, VALID_TOKEN


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    def test_defaults_without_environment(self, monkeypatch):
        for name in ("LEXOFFICE_API_KEY", "LEXOFFICE_PROXY_ADDRESS", "LEXOFFICE_RATE_LIMIT_TOKEN_LIMIT"):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()

        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.timeout_ms == 10000
        assert settings.proxy_enabled is False
        assert settings.rate_limit_enabled is False

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("LEXOFFICE_API_KEY", VALID_TOKEN)
        monkeypatch.setenv("LEXOFFICE_TIMEOUT_MS", "2500")
        monkeypatch.setenv("LEXOFFICE_PROXY_ADDRESS", "proxy.local")
        monkeypatch.setenv("LEXOFFICE_PROXY_PORT", "3128")
        monkeypatch.setenv("LEXOFFICE_PROXY_SECURE", "false")
        monkeypatch.setenv("LEXOFFICE_RATE_LIMIT_TOKEN_LIMIT", "2")
        monkeypatch.setenv("LEXOFFICE_RATE_LIMIT_REPLENISHMENT_PERIOD", "0.5")

        settings = get_settings()
        config = ConnectionConfig.from_settings(settings)

        assert config.access_token == VALID_TOKEN
        assert config.timeout_ms == 2500
        assert config.proxy == ProxySettings(address="proxy.local", port=3128, secure=False)
        assert config.proxy.url == "http://proxy.local:3128"
        assert config.rate_limit == RateLimitPolicy(token_limit=2, replenishment_period=0.5)

    def test_client_from_settings(self, monkeypatch):
        monkeypatch.setenv("LEXOFFICE_API_KEY", VALID_TOKEN)
        monkeypatch.setenv("LEXOFFICE_BASE_URL", "https://sandbox.example.test")

        client = LexofficeClient.from_settings()

        assert client.is_access_token_valid is True
        assert client.config.api_url == "https://sandbox.example.test/v1/"


# =============================================================================
# Credentials file
# =============================================================================


class TestCredentials:
    def test_client_from_credentials_file(self, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text(json.dumps({"api_key": VALID_TOKEN}))

        client = LexofficeClient.from_credentials(path)

        assert client.access_token == VALID_TOKEN
        assert client.is_access_token_valid is True

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_credentials(tmp_path / "missing.json")

    def test_file_without_key_raises(self, tmp_path):
        path = tmp_path / "creds.json"
        path.write_text(json.dumps({"user": "someone"}))

        with pytest.raises(ValueError):
            LexofficeClient.from_credentials(path)


# =============================================================================
# ConnectionConfig
# =============================================================================


class TestConnectionConfig:
    @pytest.mark.parametrize(
        "base_url, expected",
        [
            ("https://api.lexoffice.io", "https://api.lexoffice.io/v1/"),
            ("https://api.lexoffice.io/", "https://api.lexoffice.io/v1/"),
            ("https://api.lexoffice.io//", "https://api.lexoffice.io/v1/"),
        ],
    )
    def test_api_url_has_single_slashes(self, base_url, expected):
        assert ConnectionConfig(base_url=base_url).api_url == expected

    def test_non_positive_timeout_is_rejected(self):
        with pytest.raises(ValueError):
            ConnectionConfig(timeout_ms=0)

    def test_token_change_does_not_need_new_transport(self):
        config = ConnectionConfig(access_token=VALID_TOKEN)

        assert not config.transport_differs(config.with_changes(access_token="other"))
        assert config.transport_differs(config.with_changes(timeout_ms=1))

    def test_custom_token_pattern(self):
        assert is_well_formed_token("abc-123", r"^[a-z]{3}-\d{3}$")
        assert not is_well_formed_token("abc-123")
        assert not is_well_formed_token(None)

    def test_proxy_keeps_explicit_scheme(self):
        proxy = ProxySettings(address="http://proxy.local", port=8080)

        assert proxy.url == "http://proxy.local:8080"
        assert proxy.credentials is None


# =============================================================================
# Executor
# =============================================================================


class RecordingExecutor:
    """RequestExecutor that answers every request with a fixed response."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {}
        self.calls = []
        self.closed = False

    async def send(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        request = httpx.Request(method, f"{API_URL}/{url}")
        return httpx.Response(self.status_code, json=self.payload, request=request)

    async def aclose(self):
        self.closed = True


class TestExecutor:
    @pytest.mark.asyncio
    async def test_client_uses_injected_executor(self):
        executor = RecordingExecutor(payload=[{"countryCode": "DE", "countryNameEN": "Germany"}])
        client = LexofficeClient(access_token=VALID_TOKEN, executor=executor)

        countries = await client.get_countries()
        await client.aclose()

        method, url, kwargs = executor.calls[0]
        assert (method, url) == ("GET", "countries")
        assert kwargs["headers"]["Authorization"] == f"Bearer {VALID_TOKEN}"
        assert countries[0].country_name_en == "Germany"
        # Injected executors belong to the caller
        assert executor.closed is False

    @pytest.mark.asyncio
    async def test_rate_limited_executor_takes_tokens(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{API_URL}/countries", json=[])
        config = ConnectionConfig(
            access_token=VALID_TOKEN,
            rate_limit=RateLimitPolicy(token_limit=3, replenishment_period=60),
        )
        executor = HttpxRequestExecutor(config)

        await executor.send("GET", "countries")

        assert executor.limiter.available_tokens == 2
        await executor.aclose()
        assert executor.is_closed
