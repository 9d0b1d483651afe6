#!/usr/bin/env python3
"""
Attio Trust - OAuth Client Module

Authorization code flow against the Attio authorization server: authorization
URLs, code exchange, refresh, revocation and introspection. One attempt per
call; retry is a transport-layer concern.
"""

import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from urllib.parse import urlencode

from pydantic import ValidationError

from ..core.errors import (
    ArgumentError,
    ConfigurationError,
    InvalidResponseError,
    error_from_response
)
from ..core.logging_utils import get_logger, redact
from ..core.transport import HttpResponse, HttpTransport
from ..core.validation import validate_http_url, validate_required_string
from . import scopes as scope_algebra
from .models import IntrospectionResponse, TokenResponse
from .token import Token

AUTHORIZE_URL = "https://app.attio.com/authorize"
API_BASE = "https://api.attio.com/v2"
TOKEN_URL = f"{API_BASE}/oauth/token"
REVOKE_URL = f"{API_BASE}/oauth/revoke"
INTROSPECT_URL = f"{API_BASE}/oauth/introspect"

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json"
}

# 32 random bytes -> 64 hex characters
STATE_BYTES = 32


@dataclass(frozen=True)
class AuthorizationRequest:
    """Where to send the user, and the state to check on the redirect."""

    url: str
    state: str


@dataclass(frozen=True)
class RevocationResult:
    """Outcome of a revocation attempt with the failure cause, if any."""

    success: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


class OAuthClient:
    """OAuth 2.0 authorization code client for the Attio API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport=None
    ):
        validate_required_string(client_id, "client_id", error_class=ConfigurationError)
        validate_required_string(client_secret, "client_secret", error_class=ConfigurationError)
        validate_required_string(redirect_uri, "redirect_uri", error_class=ConfigurationError)
        validate_http_url(redirect_uri, "redirect_uri", error_class=ConfigurationError)

        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self.transport = transport if transport is not None else HttpTransport()
        self.logger = get_logger("oauth.client")

    @classmethod
    def from_config(cls, config, transport=None) -> "OAuthClient":
        """Build a client from a TrustConfig."""
        oauth_config = config.get_oauth_config()
        return cls(
            client_id=oauth_config["client_id"],
            client_secret=oauth_config["client_secret"],
            redirect_uri=oauth_config["redirect_uri"],
            transport=transport if transport is not None else HttpTransport.from_config(config)
        )

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    def authorization_url(
        self,
        scopes=None,
        state: Optional[str] = None,
        extras: Optional[Dict[str, str]] = None
    ) -> AuthorizationRequest:
        """Build the authorization URL the user should be redirected to.

        Args:
            scopes: Scopes to request. Empty or None requests DEFAULT_SCOPES.
            state: CSRF state. Generated when not supplied.
            extras: Additional query parameters.

        Returns:
            AuthorizationRequest with the URL and the state to verify on callback.

        Raises:
            InvalidScopeError: if any scope is not in the registry.
        """
        requested = scope_algebra.validate(scopes)
        if not requested:
            requested = list(scope_algebra.DEFAULT_SCOPES)

        state = state or secrets.token_hex(STATE_BYTES)

        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(requested),
            "state": state
        }
        if extras:
            params.update(extras)

        return AuthorizationRequest(url=f"{AUTHORIZE_URL}?{urlencode(params)}", state=state)

    def exchange_code_for_token(self, code: str) -> Token:
        """Exchange an authorization code for a Token bound to this client."""
        if not code:
            raise ArgumentError("Authorization code is required")

        data = self._post_form(TOKEN_URL, {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self._redirect_uri,
            "client_id": self._client_id,
            "client_secret": self._client_secret
        })
        token = self._token_from_payload(data)
        self.logger.info(f"Authorization code exchanged for token {redact(token.access_token)}")
        return token

    def refresh_token(self, refresh_token: str) -> Token:
        """Obtain a new Token from a refresh token."""
        if not refresh_token:
            raise ArgumentError("Refresh token is required")

        data = self._post_form(TOKEN_URL, {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self._client_id,
            "client_secret": self._client_secret
        })
        token = self._token_from_payload(data)
        self.logger.info(f"Refresh token {redact(refresh_token)} exchanged for token {redact(token.access_token)}")
        return token

    def revoke_token(self, token: Union[Token, str]) -> bool:
        """Revoke a token. Best effort: never raises, returns False on any failure."""
        return self.revoke_token_detailed(token).success

    def revoke_token_detailed(self, token: Union[Token, str]) -> RevocationResult:
        """Revoke a token and report why it failed, if it did. Never raises."""
        try:
            token_value = self._token_value(token)
            if not token_value:
                return RevocationResult(False, "Token value is empty")

            response = self._send_form(REVOKE_URL, {
                "token": token_value,
                "client_id": self._client_id,
                "client_secret": self._client_secret
            })
            if not response.ok:
                error = error_from_response(response)
                self.logger.warning(f"Token revocation rejected: {error}")
                return RevocationResult(False, str(error))

            self.logger.info(f"Token {redact(token_value)} revoked")
            return RevocationResult(True)

        except Exception as e:
            self.logger.warning(f"Token revocation failed: {e}")
            return RevocationResult(False, str(e))

    def introspect_token(self, token: Union[Token, str]) -> Dict[str, Any]:
        """Ask the authorization server about a token.

        Returns:
            Dict with at least ``active``, ``scope``, ``client_id``, ``exp`` and
            ``token_type`` (None when the server omits them), plus any extra fields.
        """
        token_value = self._token_value(token)
        if not token_value:
            raise ArgumentError("Token is required")

        data = self._post_form(INTROSPECT_URL, {
            "token": token_value,
            "client_id": self._client_id,
            "client_secret": self._client_secret
        })
        try:
            result = IntrospectionResponse.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(f"Invalid introspection response: {e}") from e

        return result.model_dump()

    def close(self) -> None:
        """Close the transport if it supports closing."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self) -> str:
        return f"<OAuthClient client_id={self._client_id} redirect_uri={self._redirect_uri}>"

    @staticmethod
    def _token_value(token: Union[Token, str]) -> Optional[str]:
        if isinstance(token, Token):
            return token.access_token
        return token

    def _send_form(self, url: str, params: Dict[str, str]) -> HttpResponse:
        return self.transport.execute("POST", url, dict(FORM_HEADERS), urlencode(params))

    def _post_form(self, url: str, params: Dict[str, str]) -> Any:
        """POST a form and return the decoded JSON body, raising on non-2xx."""
        response = self._send_form(url, params)
        if not response.ok:
            error = error_from_response(response)
            self.logger.error(f"OAuth request to {url} failed: {error}")
            raise error
        return response.json()

    def _token_from_payload(self, data: Any) -> Token:
        try:
            parsed = TokenResponse.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(f"Invalid token response: {e}") from e
        return Token.from_response(parsed, client=self)
