# Shared fixtures for attio_trust tests

import json
import logging
from urllib.parse import parse_qsl

import pytest

from attio_trust.core.transport import HttpResponse
from attio_trust.oauth.client import OAuthClient

ENV_VARS = (
    "ATTIO_CLIENT_ID",
    "ATTIO_CLIENT_SECRET",
    "ATTIO_REDIRECT_URI",
    "ATTIO_WEBHOOK_SECRET",
    "ATTIO_WEBHOOK_TOLERANCE",
    "ATTIO_HTTP_TIMEOUT",
    "ATTIO_CONNECT_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
)

CLIENT_ID = "client-id"
CLIENT_SECRET = "client-secret-9876"
REDIRECT_URI = "https://app.example.com/oauth/callback"


def json_response(status, data, headers=None):
    return HttpResponse(status=status, headers=headers or {}, body=json.dumps(data))


class FakeTransport:
    """Records every request and replays queued responses (or raises queued errors)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def queue(self, response):
        self.responses.append(response)

    def execute(self, method, url, headers=None, body=None):
        self.calls.append({
            "method": method,
            "url": url,
            "headers": dict(headers or {}),
            "body": body,
            "params": dict(parse_qsl(body or "")),
        })
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("attio_trust")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def oauth_env(clean_env):
    clean_env.setenv("ATTIO_CLIENT_ID", CLIENT_ID)
    clean_env.setenv("ATTIO_CLIENT_SECRET", CLIENT_SECRET)
    clean_env.setenv("ATTIO_REDIRECT_URI", REDIRECT_URI)
    return clean_env


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return OAuthClient(CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, transport=transport)
