#!/usr/bin/env python3
"""
Attio Trust - Validation Utilities

Parameter validation helpers. Every helper raises ArgumentError (or the
subclass passed as ``error_class``) so callers fail before touching the network.
"""

from typing import Any, Optional, Type
from urllib.parse import urlsplit

from .errors import ArgumentError


def validate_required_string(value: Any, param_name: str, error_class: Type[ArgumentError] = ArgumentError) -> str:
    """Validate that a parameter is a non-blank string."""
    if value is None:
        raise error_class(f"{param_name} is required")

    if not isinstance(value, str):
        raise error_class(f"{param_name} must be a string")

    if not value.strip():
        raise error_class(f"{param_name} is required")

    return value


def validate_http_url(value: Any, param_name: str, error_class: Type[ArgumentError] = ArgumentError) -> str:
    """Validate an absolute http(s) URL with a host."""
    if not isinstance(value, str):
        raise error_class(f"{param_name} must be a valid HTTP(S) URL")

    try:
        parts = urlsplit(value)
    except ValueError:
        raise error_class(f"{param_name} must be a valid HTTP(S) URL")

    if parts.scheme not in ("http", "https") or not parts.netloc or any(ch.isspace() for ch in value):
        raise error_class(f"{param_name} must be a valid HTTP(S) URL")

    return value


def validate_integer_param(
    value: Any,
    param_name: str,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
    error_class: Type[ArgumentError] = ArgumentError,
) -> int:
    """Validate and return an integer parameter."""
    if isinstance(value, bool):
        raise error_class(f"{param_name} must be an integer")

    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise error_class(f"{param_name} must be an integer")

    if min_value is not None and int_value < min_value:
        raise error_class(f"{param_name} must be at least {min_value}")

    if max_value is not None and int_value > max_value:
        raise error_class(f"{param_name} must be no more than {max_value}")

    return int_value
