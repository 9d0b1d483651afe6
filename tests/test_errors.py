# Tests for core/errors.py

from attio_trust.core.errors import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    ArgumentError,
    AttioTrustError,
    AuthenticationError,
    ConfigurationError,
    InsufficientScopeError,
    ServerError,
    SignatureVerificationError,
    error_from_response,
)
from attio_trust.core.transport import HttpResponse


class TestHierarchy:
    def test_argument_errors_are_value_errors(self):
        assert issubclass(ConfigurationError, ArgumentError)
        assert issubclass(ArgumentError, ValueError)
        assert issubclass(ArgumentError, AttioTrustError)

    def test_transport_errors_are_builtin_connection_errors(self):
        timeout = APITimeoutError("Request timed out", method="POST", url="https://api.attio.com/v2/oauth/token")
        assert isinstance(timeout, TimeoutError)
        assert isinstance(timeout, ConnectionError)
        assert str(timeout) == "Request timed out"
        assert timeout.method == "POST"
        assert isinstance(APIConnectionError("refused"), ConnectionError)
        assert not isinstance(APIConnectionError("refused"), TimeoutError)

    def test_signature_error_prefix(self):
        error = SignatureVerificationError("Timestamp too old")
        assert error.reason == "Timestamp too old"
        assert str(error) == "Webhook signature verification failed: Timestamp too old"

    def test_insufficient_scope_without_grants(self):
        error = InsufficientScopeError("task:write")
        assert error.granted == []
        assert str(error) == "Scope 'task:write' is required (granted: none)"


class TestAPIError:
    def test_default_message(self):
        assert str(AuthenticationError()) == "Authentication failed. Please check your OAuth credentials"

    def test_to_dict_omits_absent_fields(self):
        error = ServerError("Upstream failure", http_status=502)
        assert error.to_dict() == {"type": "ServerError", "message": "Upstream failure", "http_status": 502}


class TestErrorFromResponse:
    def test_client_error(self):
        response = HttpResponse(
            status=401,
            headers={"X-Request-ID": "req-1"},
            body='{"error": "invalid_client", "message": "Unknown client"}'
        )
        error = error_from_response(response)
        assert isinstance(error, AuthenticationError)
        assert error.message == "Unknown client"
        assert error.code == "invalid_client"
        assert error.request_id == "req-1"

    def test_server_error_with_text_body(self):
        error = error_from_response(HttpResponse(status=502, body="Bad Gateway"))
        assert isinstance(error, ServerError)
        assert error.message == "Bad Gateway"
        assert error.code is None

    def test_empty_body_uses_default_message(self):
        error = error_from_response(HttpResponse(status=500))
        assert error.message == ServerError.default_message

    def test_unexpected_status(self):
        error = error_from_response(HttpResponse(status=302, body=""))
        assert type(error) is APIError
