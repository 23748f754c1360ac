"""
Developer API OAuth 2.0 Models

Registered third-party clients, single-use authorization codes and
rotating refresh tokens. Access tokens are stateless JWTs and are not stored.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class OAuthClient(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A registered developer application."""

    __tablename__ = "oauth_clients"
    __table_args__ = (Index("idx_oauth_clients_tenant", "tenant_id"),)

    tenant_id: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    client_secret_hash: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="bcrypt hash; plain secret shown once"
    )
    redirect_uris: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    allowed_scopes: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    created_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    active: Mapped[bool] = mapped_column(default=True)


class OAuthAuthorizationCode(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Short-lived, single-use authorization code."""

    __tablename__ = "oauth_authorization_codes"

    code: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    tenant_id: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    scopes: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    redirect_uri: Mapped[str] = mapped_column(String(1000), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False)
    used: Mapped[bool] = mapped_column(default=False)


class OAuthRefreshToken(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Refresh token; revoked when rotated or explicitly revoked."""

    __tablename__ = "oauth_refresh_tokens"

    token: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    tenant_id: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    scopes: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False)
    revoked: Mapped[bool] = mapped_column(default=False)
