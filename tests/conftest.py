"""Pytest configuration and shared fixtures."""

import pytest
import pytest_asyncio

from lexoffice import LexofficeClient, reset_client
from lexoffice.config import get_settings

from factories import VALID_TOKEN


@pytest.fixture
def valid_token() -> str:
    return VALID_TOKEN


@pytest.fixture
def errors() -> list:
    """Collects errors passed to a client's error handler."""
    return []


@pytest_asyncio.fixture
async def client(errors):
    """Client with a valid token whose error handler appends to ``errors``."""
    api = LexofficeClient(access_token=VALID_TOKEN, error_handlers=[errors.append])
    yield api
    await api.aclose()


@pytest.fixture(autouse=True)
def _isolate_globals():
    """Clear the settings cache and the shared client between tests."""
    get_settings.cache_clear()
    reset_client()
    yield
    get_settings.cache_clear()
    reset_client()
