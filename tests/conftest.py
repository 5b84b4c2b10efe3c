"""Shared fixtures for the SolusVM client tests."""

from urllib.parse import parse_qsl

import httpx
import pytest

from solusvm_client import SolusVMClient
from solusvm_client.utils import config

BASE_URL = "https://master.example.com:5656/api/admin"
API_ID = "AbCdEf123"
API_KEY = "s3cr3t-key"

SETTINGS_ENV_VARS = (
    "SOLUSVM_API_URL",
    "SOLUSVM_API_ID",
    "SOLUSVM_API_KEY",
    "SOLUSVM_TIMEOUT",
    "SOLUSVM_SSL_VERIFY",
    "LOG_LEVEL",
)


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it receives."""

    def __init__(self, status_code: int = 200, text: str = '{"status":"success"}', error: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.text = text
        self.error = error
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.text)

    @property
    def last_form(self) -> dict[str, str]:
        return dict(parse_qsl(self.requests[-1].content.decode(), keep_blank_values=True))


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep real environment variables and .env files out of the tests."""
    for name in SETTINGS_ENV_VARS:
        # setenv first so the variable is removed again on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setattr(config, "_settings", config.Settings(_env_file=None))


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(transport) -> SolusVMClient:
    return SolusVMClient(BASE_URL, API_ID, API_KEY, transport=transport)


@pytest.fixture
def make_client():
    """Build a client around a RecordingTransport configured by the test."""

    def _make(**transport_options) -> tuple[SolusVMClient, RecordingTransport]:
        recording = RecordingTransport(**transport_options)
        return SolusVMClient(BASE_URL, API_ID, API_KEY, transport=recording), recording

    return _make
