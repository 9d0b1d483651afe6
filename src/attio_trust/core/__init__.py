#!/usr/bin/env python3
"""
Attio Trust - Core Module

Core functionality including errors, configuration, validation, logging and transport.
"""

from .config import TrustConfig
from .errors import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    ArgumentError,
    AttioTrustError,
    AuthenticationError,
    ConfigurationError,
    InsufficientScopeError,
    InvalidResponseError,
    InvalidScopeError,
    InvalidTokenError,
    ServerError,
    SignatureVerificationError,
    error_from_response
)
from .logging_utils import get_logger, redact, setup_logging
from .transport import HttpResponse, HttpTransport
from .validation import (
    validate_http_url,
    validate_integer_param,
    validate_required_string
)

__all__ = [
    "TrustConfig",
    "APIConnectionError",
    "APIError",
    "APITimeoutError",
    "ArgumentError",
    "AttioTrustError",
    "AuthenticationError",
    "ConfigurationError",
    "InsufficientScopeError",
    "InvalidResponseError",
    "InvalidScopeError",
    "InvalidTokenError",
    "ServerError",
    "SignatureVerificationError",
    "error_from_response",
    "get_logger",
    "redact",
    "setup_logging",
    "HttpResponse",
    "HttpTransport",
    "validate_http_url",
    "validate_integer_param",
    "validate_required_string"
]
