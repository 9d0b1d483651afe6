"""
Attio Trust

OAuth 2.0 token lifecycle, scope algebra and webhook signature verification
for Attio API clients.
"""

from .core import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    ArgumentError,
    AttioTrustError,
    AuthenticationError,
    ConfigurationError,
    HttpResponse,
    HttpTransport,
    InsufficientScopeError,
    InvalidResponseError,
    InvalidScopeError,
    InvalidTokenError,
    ServerError,
    SignatureVerificationError,
    TrustConfig
)
from .oauth import OAuthClient, Scope, Token, requires_scope, scopes
from .webhook import WebhookEvent, WebhookHandler, WebhookVerifier

__version__ = "1.0.0"
__description__ = "OAuth token lifecycle, scope algebra and webhook verification for Attio API clients"

__all__ = [
    "APIConnectionError",
    "APIError",
    "APITimeoutError",
    "ArgumentError",
    "AttioTrustError",
    "AuthenticationError",
    "ConfigurationError",
    "HttpResponse",
    "HttpTransport",
    "InsufficientScopeError",
    "InvalidResponseError",
    "InvalidScopeError",
    "InvalidTokenError",
    "ServerError",
    "SignatureVerificationError",
    "TrustConfig",
    "OAuthClient",
    "Scope",
    "Token",
    "requires_scope",
    "scopes",
    "WebhookEvent",
    "WebhookHandler",
    "WebhookVerifier"
]
