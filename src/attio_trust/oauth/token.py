#!/usr/bin/env python3
"""
Attio Trust - Token Module

One OAuth 2.0 credential: access token, optional refresh token, scopes and
expiry. ``refresh()`` and ``revoke()`` mutate the instance in place under a
per-token lock, so at most one of them is in flight per Token.
"""

import json
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt
from pydantic import ValidationError

from ..core.errors import InvalidTokenError
from ..core.logging_utils import get_logger, redact
from . import scopes as scope_algebra
from .models import TokenResponse

VALID_TOKEN_TYPES = ("Bearer", "bearer")
DEFAULT_EXPIRY_THRESHOLD = 300

logger = get_logger("oauth.token")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_scope(scope) -> List[str]:
    if scope is None:
        return []
    if isinstance(scope, str):
        return list(dict.fromkeys(scope.split()))
    return list(dict.fromkeys(scope_algebra.normalize(scope)))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Token:
    """An OAuth bearer credential bound (optionally) to the client that issued it."""

    def __init__(
        self,
        access_token: Optional[str],
        refresh_token: Optional[str] = None,
        token_type: Optional[str] = None,
        expires_in: Optional[Any] = None,
        scope=None,
        created_at: Optional[datetime] = None,
        client=None
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token or None
        self.token_type = token_type or "Bearer"
        self.expires_in = self._coerce_expires_in(expires_in)
        self.scope: List[str] = _parse_scope(scope)
        self.created_at = _as_utc(created_at) if created_at is not None else _utcnow()
        self.client = client
        self.expires_at: Optional[datetime] = self._calculate_expiration()
        self._lock = threading.Lock()

        self._validate()

    @classmethod
    def from_response(cls, response, client=None) -> "Token":
        """Build a Token from a token endpoint payload (mapping or TokenResponse)."""
        if not isinstance(response, TokenResponse):
            try:
                response = TokenResponse.model_validate(response)
            except ValidationError as e:
                raise InvalidTokenError(f"Invalid token response: {e}") from e

        return cls(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            token_type=response.token_type,
            expires_in=response.expires_in,
            scope=response.scope,
            client=client
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], client=None) -> "Token":
        """Rebuild a Token from ``to_dict()`` output."""
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return cls(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            token_type=data.get("token_type"),
            expires_in=data.get("expires_in"),
            scope=data.get("scope"),
            created_at=created_at,
            client=client
        )

    @staticmethod
    def _coerce_expires_in(expires_in) -> Optional[int]:
        if expires_in is None:
            return None
        if isinstance(expires_in, bool):
            raise InvalidTokenError("expires_in must be an integer number of seconds")
        try:
            value = int(expires_in)
        except (TypeError, ValueError):
            raise InvalidTokenError("expires_in must be an integer number of seconds")
        if value < 0:
            raise InvalidTokenError("expires_in cannot be negative")
        return value

    def _calculate_expiration(self) -> Optional[datetime]:
        if self.expires_in is None:
            return None
        return self.created_at + timedelta(seconds=self.expires_in)

    def _validate(self) -> None:
        if not self.access_token:
            raise InvalidTokenError("Access token is required")
        if self.token_type not in VALID_TOKEN_TYPES:
            raise InvalidTokenError("Invalid token type")

    def is_expired(self) -> bool:
        """True once the expiry time has been reached. Tokens without expiry never expire."""
        if self.expires_at is None:
            return False
        return _utcnow() >= self.expires_at

    def expires_soon(self, threshold: float = DEFAULT_EXPIRY_THRESHOLD) -> bool:
        """True when at most ``threshold`` seconds remain, including after expiry."""
        if self.expires_at is None:
            return False
        return (self.expires_at - _utcnow()).total_seconds() <= threshold

    def seconds_until_expiry(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return (self.expires_at - _utcnow()).total_seconds()

    def refresh(self) -> "Token":
        """Exchange the refresh token for a new access token and update this Token in place."""
        with self._lock:
            if not self.refresh_token:
                raise InvalidTokenError("No refresh token available")
            if self.client is None:
                raise InvalidTokenError("No OAuth client configured")

            new_token = self.client.refresh_token(self.refresh_token)
            self._update_from(new_token)
            logger.info(f"Token refreshed: {redact(self.access_token)}")
            return self

    def revoke(self) -> bool:
        """Revoke this token with the authorization server and discard the local secrets."""
        with self._lock:
            if self.client is None:
                raise InvalidTokenError("No OAuth client configured")

            revoked = self.client.revoke_token(self)
            if not revoked:
                logger.warning(f"Server-side revocation of {redact(self.access_token)} did not succeed; clearing local credentials")
            self.access_token = None
            self.refresh_token = None
            return True

    def _update_from(self, other: "Token") -> None:
        self.access_token = other.access_token
        if other.refresh_token:
            self.refresh_token = other.refresh_token
        self.token_type = other.token_type
        self.expires_in = other.expires_in
        self.expires_at = other.expires_at
        self.scope = list(other.scope)
        self.created_at = other.created_at

    def has_scope(self, scope) -> bool:
        """Exact membership; no hierarchy expansion."""
        normalized = scope_algebra.normalize(scope)
        return bool(normalized) and normalized[0] in self.scope

    def sufficient_for(self, resource: str, operation: str) -> bool:
        return scope_algebra.sufficient_for(self.scope, resource, operation)

    def missing_scopes(self, required) -> List[str]:
        return scope_algebra.missing(self.scope, required)

    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"

    def claims(self) -> Optional[Dict[str, Any]]:
        """Unverified JWT claims when the access token is a JWT, else None.

        Informational only: the signature is not checked.
        """
        if not self.access_token:
            return None
        try:
            return jwt.decode(self.access_token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "scope": list(self.scope),
            "created_at": self.created_at.isoformat()
        }
        return {key: value for key, value in data.items() if value is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __repr__(self) -> str:
        expires_at = self.expires_at.isoformat() if self.expires_at else None
        return (
            f"<Token token={redact(self.access_token)} "
            f"expires_at={expires_at} "
            f"scope={' '.join(self.scope)}>"
        )

    __str__ = __repr__
