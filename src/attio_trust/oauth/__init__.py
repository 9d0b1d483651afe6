#!/usr/bin/env python3
"""
Attio Trust - OAuth Module

Token lifecycle, scope algebra and the authorization code client.
"""

from . import scopes
from .client import (
    API_BASE,
    AUTHORIZE_URL,
    INTROSPECT_URL,
    REVOKE_URL,
    TOKEN_URL,
    AuthorizationRequest,
    OAuthClient,
    RevocationResult
)
from .models import IntrospectionResponse, TokenResponse
from .scope_guard import requires_scope
from .scopes import DEFAULT_SCOPES, SCOPE_DEFINITIONS, SCOPE_HIERARCHY, VALID_SCOPES, Scope
from .token import Token

__all__ = [
    "scopes",
    "API_BASE",
    "AUTHORIZE_URL",
    "INTROSPECT_URL",
    "REVOKE_URL",
    "TOKEN_URL",
    "AuthorizationRequest",
    "OAuthClient",
    "RevocationResult",
    "IntrospectionResponse",
    "TokenResponse",
    "requires_scope",
    "DEFAULT_SCOPES",
    "SCOPE_DEFINITIONS",
    "SCOPE_HIERARCHY",
    "VALID_SCOPES",
    "Scope",
    "Token"
]
