#!/usr/bin/env python3
"""
Attio Trust - Error Taxonomy

Exception hierarchy shared by the OAuth, scope and webhook modules.
"""

import json
from typing import Any, Dict, Optional


class AttioTrustError(Exception):
    """Base class for every error raised by this package."""
    pass


class ArgumentError(AttioTrustError, ValueError):
    """Bad constructor or call argument. Raised before any network I/O."""
    pass


class ConfigurationError(ArgumentError):
    """Invalid client or environment configuration."""
    pass


class InvalidScopeError(ArgumentError):
    """One or more scope names are not in the registry."""

    def __init__(self, invalid_scopes):
        self.invalid_scopes = list(invalid_scopes)
        super().__init__(f"Invalid scopes: {', '.join(self.invalid_scopes)}")


class InsufficientScopeError(AttioTrustError):
    """A token does not grant the scope an operation requires."""

    def __init__(self, required: str, granted=None):
        self.required = required
        self.granted = list(granted or [])
        granted_text = " ".join(self.granted) if self.granted else "none"
        super().__init__(f"Scope '{required}' is required (granted: {granted_text})")


class InvalidTokenError(AttioTrustError):
    """Malformed token or token missing refresh/revoke capability."""
    pass


class SignatureVerificationError(AttioTrustError):
    """Webhook signature verification failed for a specific reason."""

    PREFIX = "Webhook signature verification failed"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"{self.PREFIX}: {reason}")


class APIError(AttioTrustError):
    """Error response from an OAuth endpoint."""

    default_message = "The API returned an error"

    def __init__(
        self,
        message: Optional[str] = None,
        http_status: Optional[int] = None,
        body: Optional[str] = None,
        request_id: Optional[str] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.http_status = http_status
        self.body = body
        self.request_id = request_id
        self.code = code
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"(Code: {self.code})")
        if self.http_status:
            parts.append(f"(Status: {self.http_status})")
        if self.request_id:
            parts.append(f"(Request ID: {self.request_id})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "http_status": self.http_status,
            "request_id": self.request_id,
        }
        return {key: value for key, value in data.items() if value is not None}


class AuthenticationError(APIError):
    """4xx from the token endpoint (bad code, bad client credentials, expired refresh token)."""

    default_message = "Authentication failed. Please check your OAuth credentials"


class ServerError(APIError):
    """5xx from an OAuth endpoint."""

    default_message = "Server error occurred"


class InvalidResponseError(APIError):
    """Successful status with a body that cannot be parsed or validated."""

    default_message = "Invalid response from the API"


class APIConnectionError(AttioTrustError, ConnectionError):
    """Transport failure before a response was received."""

    def __init__(self, message: str = "Network connection error occurred", method: Optional[str] = None, url: Optional[str] = None):
        self.method = method
        self.url = url
        super().__init__(message)


class APITimeoutError(APIConnectionError, TimeoutError):
    """The transport gave up waiting for the server."""

    def __init__(self, message: str = "Request timed out", method: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message, method=method, url=url)


def _extract_error_fields(body: Optional[str]) -> Dict[str, Optional[str]]:
    """Pull message/code out of a JSON error body, falling back to the raw text."""
    if not body:
        return {"message": None, "code": None}
    try:
        data = json.loads(body)
    except ValueError:
        return {"message": body, "code": None}
    if not isinstance(data, dict):
        return {"message": body, "code": None}

    message = data.get("error_description") or data.get("message") or data.get("error") or body
    code = data.get("code") or data.get("error_code") or data.get("error")
    return {"message": str(message), "code": str(code) if code is not None else None}


def error_from_response(response) -> APIError:
    """Build the APIError subclass matching a non-2xx transport response."""
    status = response.status
    fields = _extract_error_fields(response.body)
    headers = {key.lower(): value for key, value in (response.headers or {}).items()}
    request_id = headers.get("x-request-id") or headers.get("request-id")

    if 400 <= status < 500:
        error_class = AuthenticationError
    elif status >= 500:
        error_class = ServerError
    else:
        error_class = APIError

    return error_class(
        fields["message"],
        http_status=status,
        body=response.body,
        request_id=request_id,
        code=fields["code"],
    )
