#!/usr/bin/env python3
"""
Attio Trust - Webhook Signature Module

HMAC-SHA256 verification of inbound webhook payloads with a replay window.

Signed message: ``"{timestamp}.{payload}"``. Signature header format:
``t=<unix seconds> v1=<hex digest>`` (tokens separated by spaces or commas,
unknown keys ignored, several ``v1`` entries allowed during secret rotation).
"""

import hashlib
import hmac
import json
import re
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..core.errors import ArgumentError, SignatureVerificationError
from ..core.logging_utils import get_logger
from .event import WebhookEvent

SIGNATURE_HEADER = "x-attio-signature"
TIMESTAMP_HEADER = "x-attio-timestamp"
SIGNATURE_VERSION = "v1"
DEFAULT_TOLERANCE = 300  # 5 minutes

_HEADER_SPLIT = re.compile(r"[,\s]+")

Payload = Union[str, bytes, Mapping, list]

logger = get_logger("webhook")


@dataclass(frozen=True)
class SignatureHeaders:
    """Signature and timestamp values pulled from request headers."""

    signature: str
    timestamp: str


def _payload_bytes(payload: Payload) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    try:
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ArgumentError(f"Payload is not JSON-serializable: {e}") from e


def _is_empty(payload) -> bool:
    if payload is None:
        return True
    return hasattr(payload, "__len__") and len(payload) == 0


def _hex_digest(payload: Payload, timestamp, secret: str) -> str:
    message = f"{timestamp}.".encode("utf-8") + _payload_bytes(payload)
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def _secure_compare(candidate: str, expected: str) -> bool:
    candidate_bytes = candidate.encode("utf-8")
    expected_bytes = expected.encode("utf-8")
    if len(candidate_bytes) != len(expected_bytes):
        return False
    return hmac.compare_digest(candidate_bytes, expected_bytes)


def _parse_timestamp(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def _tokens(header: str) -> Iterable[Tuple[str, Optional[str]]]:
    for element in _HEADER_SPLIT.split(header.strip()):
        if not element:
            continue
        key, sep, value = element.partition("=")
        yield (key, value) if sep else (element, None)


def parse_signature_header(header: Optional[str]) -> Tuple[Optional[str], List[str]]:
    """Split a ``t=... v1=...`` header into its timestamp and v1 candidates.

    Returns ``(None, [])`` when the header is empty or carries more than one ``t``.
    """
    if not header or not isinstance(header, str):
        return None, []

    timestamp = None
    signatures: List[str] = []
    for key, value in _tokens(header):
        if value is None:
            continue
        if key == "t":
            if timestamp is not None:
                return None, []
            timestamp = value
        elif key == SIGNATURE_VERSION and value:
            signatures.append(value)

    return timestamp, signatures


def _signature_candidates(signature: str) -> List[str]:
    """Digests in a signature value: ``v1=<hex>`` entries or bare hex tokens."""
    candidates = []
    for key, value in _tokens(str(signature)):
        if value is None:
            candidates.append(key)
        elif key == SIGNATURE_VERSION and value:
            candidates.append(value)
    return candidates


def calculate_signature(payload: Payload, timestamp, secret: str) -> str:
    """Signature for a payload in the ``v1=<hex>`` form.

    Strings and bytes are signed as-is; other payloads are compact-JSON encoded first.
    """
    return f"{SIGNATURE_VERSION}={_hex_digest(payload, timestamp, secret)}"


def build_signature_header(payload: Payload, secret: str, timestamp: Optional[int] = None) -> str:
    """Full ``t=<ts> v1=<hex>`` header, as a sender would emit it."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    return f"t={timestamp} {calculate_signature(payload, timestamp, secret)}"


def verify_signature(
    payload: Optional[Payload],
    signature: Optional[str],
    timestamp,
    secret: Optional[str],
    tolerance: int = DEFAULT_TOLERANCE
) -> bool:
    """Verify a webhook signature, raising with the reason on failure.

    Raises:
        SignatureVerificationError: with one of the reasons ``Payload cannot be None``,
            ``Signature cannot be None or empty``, ``Timestamp cannot be None or empty``,
            ``Secret cannot be None or empty``, ``Invalid timestamp``, ``Timestamp too old``,
            ``Timestamp too far in the future``, ``Invalid payload`` or ``Invalid signature``.
    """
    if payload is None:
        raise SignatureVerificationError("Payload cannot be None")
    if not signature:
        raise SignatureVerificationError("Signature cannot be None or empty")
    if timestamp is None or str(timestamp) == "":
        raise SignatureVerificationError("Timestamp cannot be None or empty")
    if not secret:
        raise SignatureVerificationError("Secret cannot be None or empty")

    timestamp_int = _parse_timestamp(timestamp)
    if timestamp_int is None:
        raise SignatureVerificationError("Invalid timestamp")

    current_time = int(time.time())
    if timestamp_int < current_time - tolerance:
        raise SignatureVerificationError("Timestamp too old")
    if timestamp_int > current_time + tolerance:
        raise SignatureVerificationError("Timestamp too far in the future")

    try:
        expected = _hex_digest(payload, str(timestamp).strip(), secret)
    except ArgumentError as e:
        raise SignatureVerificationError("Invalid payload") from e
    if not any(_secure_compare(candidate, expected) for candidate in _signature_candidates(signature)):
        raise SignatureVerificationError("Invalid signature")

    return True


def is_valid_signature(
    payload: Optional[Payload],
    signature: Optional[str],
    timestamp,
    secret: Optional[str],
    tolerance: int = DEFAULT_TOLERANCE
) -> bool:
    """Boolean form of ``verify_signature``."""
    try:
        return verify_signature(payload, signature, timestamp, secret, tolerance=tolerance)
    except SignatureVerificationError as e:
        logger.debug(str(e))
        return False


def _normalize_header_name(name: str) -> str:
    normalized = str(name).lower().replace("_", "-")
    if normalized.startswith("http-"):
        normalized = normalized[len("http-"):]
    return normalized


def extract_from_headers(headers: Mapping) -> SignatureHeaders:
    """Find the signature and timestamp headers.

    Lookup ignores case, treats ``_`` and ``-`` alike and strips a CGI ``HTTP_`` prefix.

    Raises:
        SignatureVerificationError: if either header is missing.
    """
    found = {}
    for name, value in (headers or {}).items():
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        found.setdefault(_normalize_header_name(name), value)

    signature = found.get(SIGNATURE_HEADER)
    timestamp = found.get(TIMESTAMP_HEADER)

    if not signature:
        raise SignatureVerificationError(f"Missing signature header: {SIGNATURE_HEADER}")
    if not timestamp:
        raise SignatureVerificationError(f"Missing timestamp header: {TIMESTAMP_HEADER}")

    return SignatureHeaders(signature=str(signature), timestamp=str(timestamp))


class WebhookVerifier:
    """Verifies signature headers against one shared secret. Immutable and thread-safe."""

    def __init__(self, secret: str, tolerance: int = DEFAULT_TOLERANCE):
        if not secret:
            raise ArgumentError("Webhook secret is required")
        self._secret = secret
        self.tolerance = tolerance

    def verify(self, payload: Optional[Payload], signature_header: Optional[str], tolerance: Optional[int] = None) -> bool:
        """Check a ``t=... v1=...`` header. Returns False on any failure and never raises."""
        tolerance = self.tolerance if tolerance is None else tolerance

        if _is_empty(payload):
            return False

        timestamp, candidates = parse_signature_header(signature_header)
        if timestamp is None or not candidates:
            return False

        timestamp_int = _parse_timestamp(timestamp)
        if timestamp_int is None:
            return False

        if abs(int(time.time()) - timestamp_int) > tolerance:
            return False

        try:
            expected = _hex_digest(payload, timestamp, self._secret)
        except ArgumentError:
            return False
        return any(_secure_compare(candidate, expected) for candidate in candidates)

    def sign(self, payload: Payload, timestamp: Optional[int] = None) -> str:
        """Header value a sender holding this secret would produce."""
        return build_signature_header(payload, self._secret, timestamp=timestamp)

    def __repr__(self) -> str:
        return f"<WebhookVerifier tolerance={self.tolerance}>"


class WebhookHandler:
    """Verifies and decodes webhook requests.

    A request is either a mapping with ``headers`` and ``body`` keys or an
    object exposing ``headers`` plus ``get_data()``, ``body`` or ``content``.
    """

    def __init__(self, secret: str, tolerance: int = DEFAULT_TOLERANCE):
        if not secret:
            raise ArgumentError("Webhook secret is required")
        self._secret = secret
        self.tolerance = tolerance

    @property
    def secret(self) -> str:
        return self._secret

    def verify_request(self, request, tolerance: Optional[int] = None) -> bool:
        """Verify a request's signature headers against its body.

        Raises:
            SignatureVerificationError: on a missing header or a failed check.
            ArgumentError: if the request shape is not supported.
        """
        headers = self._extract_headers(request)
        body = self._extract_body(request)
        signature_data = extract_from_headers(headers)

        return verify_signature(
            payload=body,
            signature=signature_data.signature,
            timestamp=signature_data.timestamp,
            secret=self._secret,
            tolerance=self.tolerance if tolerance is None else tolerance
        )

    def parse_and_verify(self, request) -> Any:
        """Verify the request, then decode its JSON body."""
        self.verify_request(request)

        body = self._extract_body(request)
        if not isinstance(body, (str, bytes)):
            return body
        try:
            return json.loads(body)
        except ValueError as e:
            raise SignatureVerificationError(f"Invalid JSON payload: {e}") from e

    def parse_event(self, request) -> WebhookEvent:
        """Verify the request and wrap its payload in a WebhookEvent."""
        payload = self.parse_and_verify(request)
        if not isinstance(payload, Mapping):
            raise SignatureVerificationError("Invalid JSON payload: expected an object")
        return WebhookEvent(payload)

    @staticmethod
    def _extract_headers(request) -> Mapping:
        if isinstance(request, Mapping):
            return request.get("headers") or {}
        headers = getattr(request, "headers", None)
        if headers is None:
            raise ArgumentError(f"Unsupported request type: {type(request).__name__}")
        return headers

    @staticmethod
    def _extract_body(request):
        if isinstance(request, Mapping):
            body = request.get("body")
            return "" if body is None else body

        get_data = getattr(request, "get_data", None)
        if callable(get_data):
            return get_data()

        body = getattr(request, "body", None)
        if body is not None and not callable(body):
            if hasattr(body, "read"):
                if hasattr(body, "seek"):
                    body.seek(0)
                return body.read()
            return body

        content = getattr(request, "content", None)
        if isinstance(content, (str, bytes)):
            return content

        raise ArgumentError(f"Unsupported request type: {type(request).__name__}")
