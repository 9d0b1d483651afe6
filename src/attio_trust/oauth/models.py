#!/usr/bin/env python3
"""
Attio Trust - OAuth Response Models

Typed views of the token and introspection endpoint payloads. Raw JSON is
validated here once, at the HTTP boundary.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenResponse(BaseModel):
    """Body of a successful ``/oauth/token`` response."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_in: Optional[int] = Field(default=None, ge=0)
    scope: Union[str, List[str], None] = None

    @field_validator("refresh_token")
    @classmethod
    def _blank_refresh_token_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class IntrospectionResponse(BaseModel):
    """Body of an ``/oauth/introspect`` response. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    active: bool
    scope: Optional[str] = None
    client_id: Optional[str] = None
    exp: Optional[int] = None
    token_type: Optional[str] = None

    @property
    def scopes(self) -> List[str]:
        return self.scope.split() if self.scope else []
