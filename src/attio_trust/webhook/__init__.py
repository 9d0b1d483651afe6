#!/usr/bin/env python3
"""
Attio Trust - Webhook Module

Inbound webhook authentication and event parsing.
"""

from .event import EventAction, EventCategory, EventType, WebhookEvent
from .signature import (
    DEFAULT_TOLERANCE,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    SignatureHeaders,
    WebhookHandler,
    WebhookVerifier,
    build_signature_header,
    calculate_signature,
    extract_from_headers,
    is_valid_signature,
    parse_signature_header,
    verify_signature
)

__all__ = [
    "EventAction",
    "EventCategory",
    "EventType",
    "WebhookEvent",
    "DEFAULT_TOLERANCE",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "SignatureHeaders",
    "WebhookHandler",
    "WebhookVerifier",
    "build_signature_header",
    "calculate_signature",
    "extract_from_headers",
    "is_valid_signature",
    "parse_signature_header",
    "verify_signature"
]
