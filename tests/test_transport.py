# Tests for core/transport.py using httpx.MockTransport

import json
import logging

import httpx
import pytest

from attio_trust.core.errors import APIConnectionError, APITimeoutError, InvalidResponseError
from attio_trust.core.transport import HttpResponse, HttpTransport

URL = "https://api.attio.com/v2/oauth/token"


def _transport(handler):
    return HttpTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestExecute:
    def test_sends_request_and_wraps_response(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["content"] = request.content
            seen["content_type"] = request.headers["content-type"]
            return httpx.Response(200, json={"access_token": "abc"}, headers={"x-request-id": "req-1"})

        transport = _transport(handler)
        response = transport.execute(
            "POST", URL, {"Content-Type": "application/x-www-form-urlencoded"}, "grant_type=authorization_code"
        )

        assert seen == {
            "method": "POST",
            "content": b"grant_type=authorization_code",
            "content_type": "application/x-www-form-urlencoded",
        }
        assert response.status == 200
        assert response.ok
        assert response.headers["x-request-id"] == "req-1"
        assert response.json() == {"access_token": "abc"}

    def test_error_status_is_returned_not_raised(self):
        transport = _transport(lambda request: httpx.Response(401, json={"error": "invalid_client"}))
        response = transport.execute("POST", URL)
        assert response.status == 401
        assert not response.ok

    def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(APITimeoutError) as excinfo:
            _transport(handler).execute("POST", URL)

        assert isinstance(excinfo.value, APIConnectionError)
        assert excinfo.value.method == "POST"
        assert excinfo.value.url == URL

    def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(APIConnectionError, match="connection refused") as excinfo:
            _transport(handler).execute("POST", URL)

        assert not isinstance(excinfo.value, APITimeoutError)

    def test_debug_log_redacts_authorization(self, caplog):
        transport = _transport(lambda request: httpx.Response(200, text="{}"))

        with caplog.at_level(logging.DEBUG, logger="attio_trust"):
            transport.execute("GET", URL, {"Authorization": "Bearer very-secret-token"})

        assert "[REDACTED]" in caplog.text
        assert "very-secret-token" not in caplog.text


class TestLifecycle:
    def test_injected_client_is_left_open(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        HttpTransport(client=client).close()
        assert client.is_closed is False
        client.close()

    def test_owned_client_is_closed(self):
        with HttpTransport(timeout=5, connect_timeout=2) as transport:
            assert transport.http_client.timeout.connect == 2
            assert transport.http_client.timeout.read == 5
        assert transport.http_client.is_closed is True


class TestHttpResponse:
    def test_empty_body(self):
        with pytest.raises(InvalidResponseError, match="Empty response body"):
            HttpResponse(status=200).json()

    def test_invalid_json(self):
        with pytest.raises(InvalidResponseError) as excinfo:
            HttpResponse(status=200, body="not json").json()
        assert excinfo.value.http_status == 200

    def test_json_body(self):
        body = json.dumps({"active": True})
        assert HttpResponse(status=200, body=body).json() == {"active": True}
