#!/usr/bin/env python3
"""
Attio Trust - HTTP Transport Module

Default transport collaborator for the OAuth client. Performs exactly one
attempt per call; retry and backoff belong to the caller.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import httpx

from .errors import APIConnectionError, APITimeoutError, InvalidResponseError
from .logging_utils import get_logger

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


@dataclass
class HttpResponse:
    """Status, headers and decoded body of one HTTP exchange."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON, raising InvalidResponseError on garbage."""
        if not self.body:
            raise InvalidResponseError("Empty response body", http_status=self.status)
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise InvalidResponseError(f"Invalid JSON response: {e}", http_status=self.status, body=self.body)


def _sanitize_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        key: ("[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value)
        for key, value in headers.items()
    }


class HttpTransport:
    """Synchronous transport built on ``httpx.Client``."""

    def __init__(
        self,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
        client: Optional[httpx.Client] = None
    ):
        self.http_client = client or httpx.Client(timeout=httpx.Timeout(timeout, connect=connect_timeout))
        self._owns_client = client is None
        self.logger = get_logger("transport")

    @classmethod
    def from_config(cls, config) -> "HttpTransport":
        return cls(timeout=config.http_timeout, connect_timeout=config.connect_timeout)

    def execute(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Union[str, bytes]] = None
    ) -> HttpResponse:
        """Send one request and return the raw response, whatever its status."""
        request_headers = dict(headers or {})
        self.logger.debug(f"{method} {url} headers={_sanitize_headers(request_headers)}")

        try:
            response = self.http_client.request(
                method,
                url,
                headers=request_headers,
                content=body
            )
        except httpx.TimeoutException as e:
            self.logger.error(f"Request timed out: {method} {url}: {e}")
            raise APITimeoutError(f"Request timed out: {e}", method=method, url=url) from e
        except httpx.TransportError as e:
            self.logger.error(f"Connection failed: {method} {url}: {e}")
            raise APIConnectionError(f"Connection failed: {type(e).__name__} - {e}", method=method, url=url) from e

        self.logger.debug(f"{method} {url} -> HTTP {response.status_code}")
        return HttpResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.text
        )

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self.http_client is not None:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
