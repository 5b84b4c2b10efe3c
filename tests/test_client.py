"""Tests for request construction and the transport layer."""

import httpx
import pydantic
import pytest

from solusvm_client import (
    ConfigurationError,
    InvalidArgumentError,
    SolusVMClient,
    SolusVMConnectionError,
    SolusVMTimeoutError,
    TransportError,
)
from solusvm_client.utils import config

BASE_URL = "https://master.example.com:5656/api/admin"


class TestConstruction:
    def test_trailing_slash_is_stripped(self):
        client = SolusVMClient(BASE_URL + "/", "id", "key")
        assert client.identity.command_url == BASE_URL + "/command.php"

    @pytest.mark.parametrize(
        "url, api_id, api_key, missing",
        [
            (None, "id", "key", "url"),
            (BASE_URL, "", "key", "api_id"),
            (BASE_URL, "id", None, "api_key"),
        ],
    )
    def test_missing_identity_fails(self, url, api_id, api_key, missing):
        with pytest.raises(ConfigurationError, match=missing):
            SolusVMClient(url, api_id, api_key)

    def test_identity_comes_from_settings(self, monkeypatch):
        monkeypatch.setenv("SOLUSVM_API_URL", BASE_URL)
        monkeypatch.setenv("SOLUSVM_API_ID", "env-id")
        monkeypatch.setenv("SOLUSVM_API_KEY", "env-key")
        monkeypatch.setenv("SOLUSVM_TIMEOUT", "7.5")
        monkeypatch.setattr(config, "_settings", config.Settings(_env_file=None))

        client = SolusVMClient()

        assert client.identity.api_id == "env-id"
        assert client.identity.api_key.get_secret_value() == "env-key"
        assert client.timeout == 7.5
        assert client.ssl_verify is False

    def test_explicit_arguments_win_over_settings(self, monkeypatch):
        monkeypatch.setenv("SOLUSVM_API_ID", "env-id")
        monkeypatch.setattr(config, "_settings", config.Settings(_env_file=None))

        client = SolusVMClient(BASE_URL, "explicit-id", "key", timeout=3, ssl_verify=True)

        assert client.identity.api_id == "explicit-id"
        assert client.timeout == 3
        assert client.ssl_verify is True

    def test_default_timeout_is_twenty_seconds(self):
        assert SolusVMClient(BASE_URL, "id", "key").timeout == 20

    def test_key_never_appears_in_repr(self):
        client = SolusVMClient(BASE_URL, "id", "super-secret")
        assert "super-secret" not in repr(client)
        assert "super-secret" not in repr(client.identity)

    def test_identity_is_immutable(self):
        client = SolusVMClient(BASE_URL, "id", "key")
        with pytest.raises(pydantic.ValidationError):
            client.identity.api_id = "other"


class TestBuildRequest:
    def test_credentials_and_format_are_appended(self, client):
        data = client.build_request("vserver-reboot", {"vserverid": 5})
        assert data == {
            "action": "vserver-reboot",
            "vserverid": 5,
            "id": "AbCdEf123",
            "key": "s3cr3t-key",
            "rdtype": "json",
        }
        assert list(data)[0] == "action"

    def test_empty_params(self, client):
        assert set(client.build_request("client-list")) == {"action", "id", "key", "rdtype"}

    @pytest.mark.parametrize("action", ["", None])
    def test_action_is_required(self, client, action):
        with pytest.raises(InvalidArgumentError, match="action"):
            client.build_request(action)

    @pytest.mark.parametrize("reserved", ["action", "id", "key", "rdtype"])
    def test_reserved_fields_cannot_be_overridden(self, client, reserved):
        with pytest.raises(InvalidArgumentError) as exc_info:
            client.build_request("vserver-boot", {reserved: "x"})
        assert exc_info.value.field == reserved


class TestExecute:
    def test_posts_form_to_command_endpoint(self, client, transport):
        client.execute("vserver-status", {"vserverid": 12})

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == BASE_URL + "/command.php"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.headers["connection"] == "close"
        assert "expect" not in request.headers
        assert transport.last_form == {
            "action": "vserver-status",
            "vserverid": "12",
            "id": "AbCdEf123",
            "key": "s3cr3t-key",
            "rdtype": "json",
        }

    def test_returns_body_verbatim(self, make_client):
        body = '{"status":"success","statusmsg":"online","vserverid":"12"}'
        client, _ = make_client(text=body)
        assert client.execute("vserver-status", {"vserverid": 12}) == body

    @pytest.mark.parametrize("status_code", [403, 500, 502])
    def test_http_errors_are_returned_not_raised(self, make_client, status_code):
        client, _ = make_client(status_code=status_code, text='{"status":"error","statusmsg":"Invalid key"}')
        assert "Invalid key" in client.execute("vserver-status", {"vserverid": 1})

    def test_connection_failure(self, make_client):
        client, recording = make_client(error=httpx.ConnectError("Connection refused"))

        with pytest.raises(SolusVMConnectionError) as exc_info:
            client.reboot(5)

        assert isinstance(exc_info.value, TransportError)
        assert "Connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert len(recording.requests) == 1

    def test_timeout(self, make_client):
        client, recording = make_client(error=httpx.ReadTimeout("timed out"))

        with pytest.raises(SolusVMTimeoutError):
            client.get_server_info(5)

        assert len(recording.requests) == 1

    def test_other_transport_failures(self, make_client):
        client, recording = make_client(error=httpx.RemoteProtocolError("peer closed connection"))

        with pytest.raises(TransportError) as exc_info:
            client.list_clients()

        assert not isinstance(exc_info.value, (SolusVMConnectionError, SolusVMTimeoutError))
        assert exc_info.value.url == BASE_URL + "/command.php"
        assert len(recording.requests) == 1

    def test_corrupt_response_encoding(self):
        def corrupt_gzip(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

        client = SolusVMClient(BASE_URL, "id", "key", transport=httpx.MockTransport(corrupt_gzip))

        with pytest.raises(TransportError) as exc_info:
            client.reboot(5)

        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    def test_each_call_is_independent(self, client, transport):
        client.boot(1)
        client.boot(2)
        assert len(transport.requests) == 2
        assert b"vserverid=1&" in transport.requests[0].content
        assert b"vserverid=2&" in transport.requests[1].content

    def test_secrets_are_not_logged(self, client, caplog):
        with caplog.at_level("DEBUG", logger="solusvm_client"):
            client.change_root_password(5, "hunter2")
        assert "hunter2" not in caplog.text
        assert "s3cr3t-key" not in caplog.text
        assert "vserver-rootpassword" in caplog.text
