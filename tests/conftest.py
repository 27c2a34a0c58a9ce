"""
Shared fixtures.

Tools get an AsyncMock standing in for CodaClient, so no test talks to the
real API. asyncio.sleep is patched wherever the export workflow polls.
"""

from unittest.mock import AsyncMock, patch

import pytest

from coda_mcp.client import CodaClient
from coda_mcp.config import Settings, get_settings
from coda_mcp.registry import reset_registry


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", poll_interval=5.0, max_poll_attempts=5)


@pytest.fixture
def mock_client() -> AsyncMock:
    return AsyncMock(spec=CodaClient)


@pytest.fixture
def no_sleep():
    """Replace the poll wait so tests run instantly; yields the mock."""
    with patch("coda_mcp.export.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def coda_env(monkeypatch):
    """Environment for code paths that build settings themselves."""
    monkeypatch.setenv("API_KEY", "test-key")
    monkeypatch.delenv("CODA_API_BASE", raising=False)
    monkeypatch.delenv("CODA_EXPORT_MAX_ATTEMPTS", raising=False)
    monkeypatch.delenv("CODA_EXPORT_POLL_INTERVAL", raising=False)
    get_settings.cache_clear()
    reset_registry()
    yield
    get_settings.cache_clear()
    reset_registry()


def export_started(request_id: str = "req-1") -> dict:
    return {"id": request_id, "status": "inProgress", "href": f"https://coda.io/apis/v1/export/{request_id}"}


def export_status(status: str, download_link: str = None) -> dict:
    resp = {"id": "req-1", "status": status}
    if download_link is not None:
        resp["downloadLink"] = download_link
    return resp
