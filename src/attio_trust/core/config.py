#!/usr/bin/env python3
"""
Attio Trust - Core Configuration

Handles environment variables, configuration validation, and client settings.
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .logging_utils import redact
from .validation import validate_http_url, validate_integer_param

# Load environment variables
load_dotenv()

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _get_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


class TrustConfig:
    """Configuration management for the Attio trust layer."""

    def __init__(self):
        # OAuth Configuration
        self.client_id: Optional[str] = os.getenv("ATTIO_CLIENT_ID")
        self.client_secret: Optional[str] = os.getenv("ATTIO_CLIENT_SECRET")
        self.redirect_uri: Optional[str] = os.getenv("ATTIO_REDIRECT_URI")

        # Webhook Configuration
        self.webhook_secret: Optional[str] = os.getenv("ATTIO_WEBHOOK_SECRET")
        self.webhook_tolerance = os.getenv("ATTIO_WEBHOOK_TOLERANCE", "300")

        # Transport Configuration
        self.http_timeout = _get_float("ATTIO_HTTP_TIMEOUT", "30")
        self.connect_timeout = _get_float("ATTIO_CONNECT_TIMEOUT", "10")

        # Logging Configuration
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s")
        self.log_file: Optional[str] = os.getenv("LOG_FILE")

        # Validate configuration
        self._validate_config()

    def _validate_config(self):
        """Validate configuration settings."""
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.log_level}. Must be one of {VALID_LOG_LEVELS}")

        if self.http_timeout <= 0:
            raise ConfigurationError("ATTIO_HTTP_TIMEOUT must be positive")
        if self.connect_timeout <= 0:
            raise ConfigurationError("ATTIO_CONNECT_TIMEOUT must be positive")

        self.webhook_tolerance = validate_integer_param(
            self.webhook_tolerance, "ATTIO_WEBHOOK_TOLERANCE", min_value=0, error_class=ConfigurationError
        )

        # Only checked when set; OAuthClient re-validates everything at construction
        if self.redirect_uri:
            validate_http_url(self.redirect_uri, "ATTIO_REDIRECT_URI", error_class=ConfigurationError)

    def is_oauth_configured(self) -> bool:
        """Check if OAuth credentials are configured."""
        return bool(self.client_id and self.client_secret and self.redirect_uri)

    def is_webhook_configured(self) -> bool:
        """Check if a webhook signing secret is configured."""
        return bool(self.webhook_secret)

    def get_oauth_config(self) -> Dict[str, Optional[str]]:
        """Get OAuth configuration."""
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri
        }

    def get_info(self) -> Dict[str, Any]:
        """Get configuration information for logging and status, with secrets redacted."""
        return {
            "client_id": self.client_id,
            "client_secret": redact(self.client_secret) if self.client_secret else None,
            "redirect_uri": self.redirect_uri,
            "webhook_secret": redact(self.webhook_secret) if self.webhook_secret else None,
            "webhook_tolerance": self.webhook_tolerance,
            "http_timeout": self.http_timeout,
            "connect_timeout": self.connect_timeout,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "oauth_configured": self.is_oauth_configured(),
            "webhook_configured": self.is_webhook_configured()
        }
