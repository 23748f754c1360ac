"""
Developer API Pydantic Schemas

OAuth 2.0 client registration and token endpoint payloads.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from edpsych.core.schemas.base import PartialUpdate


class OAuthClientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    redirect_uris: list[str] = Field(min_length=1)
    allowed_scopes: list[str] = Field(min_length=1)


class OAuthClientUpdate(PartialUpdate):
    nullable_fields = frozenset({"description"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    redirect_uris: list[str] | None = Field(default=None, min_length=1)
    allowed_scopes: list[str] | None = Field(default=None, min_length=1)
    active: bool | None = None


class OAuthClientSchema(BaseModel):
    """Registered client (the secret is never returned here)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: str
    name: str
    description: str | None = None
    client_id: str
    redirect_uris: list[str]
    allowed_scopes: list[str]
    created_by_id: UUID
    active: bool
    created_at: datetime


class OAuthClientCreated(BaseModel):
    """Registration response; `client_secret` is shown only this once."""

    client: OAuthClientSchema
    client_secret: str


class AuthorizeRequest(BaseModel):
    client_id: str
    redirect_uri: str
    scopes: list[str] = Field(min_length=1)
    state: str | None = None


class AuthorizeResponse(BaseModel):
    code: str
    redirect_uri: str
    state: str | None = None


class OAuthTokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_token: str
    scope: str


class RevokeRequest(BaseModel):
    refresh_token: str


class IntrospectionResponse(BaseModel):
    active: bool = True
    payload: dict[str, Any]
