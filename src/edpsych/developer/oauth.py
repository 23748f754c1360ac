"""
Developer API OAuth 2.0 Service

Authorization-code flow for third-party integrations:
- client registration (secret shown once, stored as a bcrypt hash)
- single-use authorization codes
- stateless JWT access tokens with rotating refresh tokens

Errors are raised as OAuthError carrying an RFC 6749 error code; the API
layer maps them to HTTP status codes.
"""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from sqlalchemy import select

from edpsych.config import settings
from edpsych.core.models import OAuthAuthorizationCode, OAuthClient, OAuthRefreshToken
from edpsych.core.models.base import as_utc, utcnow
from edpsych.core.security import hash_password, verify_password
from edpsych.core.validation import ValidationError, validate_redirect_uri

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

CLIENT_ID_PREFIX = "edpsych_"
JWT_ALGORITHM = "HS256"


class OAuthError(Exception):
    """OAuth failure with an RFC 6749 error code."""

    def __init__(self, error: str, description: str):
        super().__init__(description)
        self.error = error
        self.description = description


def _validate_redirect_uris(redirect_uris: Sequence[str]) -> list[str]:
    try:
        return [validate_redirect_uri(uri) for uri in redirect_uris]
    except ValidationError as e:
        raise OAuthError("invalid_request", str(e)) from e


class OAuthService:
    """Database-backed OAuth 2.0 provider for the developer API."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    async def register_client(
        self,
        *,
        tenant_id: str,
        name: str,
        description: str | None,
        redirect_uris: Sequence[str],
        allowed_scopes: Sequence[str],
        created_by: UUID,
    ) -> tuple[OAuthClient, str]:
        """Register a client.

        Returns:
            (client, plain_client_secret); the plain secret is not stored
        """
        uris = _validate_redirect_uris(redirect_uris)

        client_secret = secrets.token_hex(64)
        client = OAuthClient(
            tenant_id=tenant_id,
            name=name,
            description=description,
            client_id=f"{CLIENT_ID_PREFIX}{secrets.token_hex(24)}",
            client_secret_hash=hash_password(client_secret),
            redirect_uris=uris,
            allowed_scopes=list(dict.fromkeys(allowed_scopes)),
            created_by_id=created_by,
            active=True,
        )
        self.db.add(client)
        await self.db.commit()
        await self.db.refresh(client)

        logger.info(f"Registered OAuth client {client.client_id} for tenant {tenant_id}")
        return client, client_secret

    async def get_client(self, client_id: str, tenant_id: str | None = None) -> OAuthClient | None:
        stmt = select(OAuthClient).where(OAuthClient.client_id == client_id)
        if tenant_id is not None:
            stmt = stmt.where(OAuthClient.tenant_id == tenant_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_clients(self, tenant_id: str) -> list[OAuthClient]:
        result = await self.db.execute(
            select(OAuthClient)
            .where(OAuthClient.tenant_id == tenant_id)
            .order_by(OAuthClient.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_client(
        self, client_id: str, tenant_id: str, updates: dict[str, Any]
    ) -> OAuthClient:
        """Partially update a client; redirect URIs are re-validated."""
        client = await self.get_client(client_id, tenant_id)
        if client is None:
            raise OAuthError("not_found", "Client not found")

        if updates.get("redirect_uris") is not None:
            updates["redirect_uris"] = _validate_redirect_uris(updates["redirect_uris"])

        for field, value in updates.items():
            setattr(client, field, value)

        await self.db.commit()
        await self.db.refresh(client)
        return client

    async def delete_client(self, client_id: str, tenant_id: str) -> None:
        client = await self.get_client(client_id, tenant_id)
        if client is None:
            raise OAuthError("not_found", "Client not found")

        await self.db.delete(client)
        await self.db.commit()
        logger.info(f"Deleted OAuth client {client_id}")

    async def _authenticate_client(
        self, client_id: str, client_secret: str, tenant_id: str
    ) -> OAuthClient:
        client = await self.get_client(client_id, tenant_id)
        if client is None:
            raise OAuthError("invalid_client", "Client not found")
        if not client.active:
            raise OAuthError("invalid_client", "Client is not active")
        if not verify_password(client_secret, client.client_secret_hash):
            raise OAuthError("invalid_client", "Invalid client secret")
        return client

    # ------------------------------------------------------------------
    # Authorization codes
    # ------------------------------------------------------------------

    async def generate_authorization_code(
        self,
        *,
        client_id: str,
        tenant_id: str,
        user_id: UUID,
        scopes: Sequence[str],
        redirect_uri: str,
    ) -> str:
        """Issue a single-use authorization code for an authenticated user.

        Only clients registered in the user's tenant can be authorized.
        """
        client = await self.get_client(client_id, tenant_id)
        if client is None:
            raise OAuthError("invalid_client", "Client not found")
        if not client.active:
            raise OAuthError("invalid_client", "Client is not active")
        if redirect_uri not in client.redirect_uris:
            raise OAuthError("invalid_request", "Invalid redirect URI")
        for scope in scopes:
            if scope not in client.allowed_scopes:
                raise OAuthError("invalid_scope", f"Scope not allowed: {scope}")

        code = secrets.token_hex(32)
        self.db.add(
            OAuthAuthorizationCode(
                code=code,
                client_id=client_id,
                tenant_id=tenant_id,
                user_id=user_id,
                scopes=list(scopes),
                redirect_uri=redirect_uri,
                expires_at=utcnow() + timedelta(minutes=settings.OAUTH_CODE_TTL_MINUTES),
                used=False,
            )
        )
        await self.db.commit()
        return code

    async def exchange_authorization_code(
        self, *, code: str, client_id: str, client_secret: str, redirect_uri: str
    ) -> dict[str, Any]:
        """Exchange a code for an access/refresh token pair."""
        result = await self.db.execute(
            select(OAuthAuthorizationCode).where(OAuthAuthorizationCode.code == code)
        )
        auth_code = result.scalar_one_or_none()

        if auth_code is None:
            raise OAuthError("invalid_grant", "Invalid authorization code")
        if auth_code.used:
            raise OAuthError("invalid_grant", "Authorization code already used")
        if as_utc(auth_code.expires_at) < utcnow():
            raise OAuthError("invalid_grant", "Authorization code expired")
        if auth_code.client_id != client_id:
            raise OAuthError("invalid_grant", "Client ID mismatch")
        if auth_code.redirect_uri != redirect_uri:
            raise OAuthError("invalid_grant", "Redirect URI mismatch")

        await self._authenticate_client(client_id, client_secret, auth_code.tenant_id)

        auth_code.used = True
        return await self.generate_access_token(
            client_id=client_id,
            tenant_id=auth_code.tenant_id,
            user_id=auth_code.user_id,
            scopes=auth_code.scopes,
        )

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def generate_access_token(
        self, *, client_id: str, tenant_id: str, user_id: UUID, scopes: Sequence[str]
    ) -> dict[str, Any]:
        """Sign an access token and store a new refresh token.

        Returns the token endpoint response body.
        """
        now = utcnow()
        ttl = settings.OAUTH_ACCESS_TOKEN_TTL_SECONDS
        payload = {
            "key_id": client_id,
            "tenant_id": tenant_id,
            "sub": str(user_id),
            "permissions": list(scopes),
            "iat": int(now.timestamp()),
            "exp": int(now.timestamp()) + ttl,
        }
        access_token = jwt.encode(payload, settings.oauth_secret, algorithm=JWT_ALGORITHM)

        refresh_token = secrets.token_hex(64)
        self.db.add(
            OAuthRefreshToken(
                token=refresh_token,
                client_id=client_id,
                tenant_id=tenant_id,
                user_id=user_id,
                scopes=list(scopes),
                expires_at=now + timedelta(days=settings.OAUTH_REFRESH_TOKEN_TTL_DAYS),
                revoked=False,
            )
        )
        await self.db.commit()

        logger.info(f"Issued access token for client {client_id} (tenant {tenant_id})")
        return {
            "access_token": access_token,
            "token_type": "Bearer",
            "expires_in": ttl,
            "refresh_token": refresh_token,
            "scope": " ".join(scopes),
        }

    async def _get_refresh_token(self, token: str) -> OAuthRefreshToken | None:
        result = await self.db.execute(
            select(OAuthRefreshToken).where(OAuthRefreshToken.token == token)
        )
        return result.scalar_one_or_none()

    async def refresh_access_token(
        self, *, refresh_token: str, client_id: str, client_secret: str
    ) -> dict[str, Any]:
        """Issue new tokens and revoke the presented refresh token."""
        stored = await self._get_refresh_token(refresh_token)

        if stored is None:
            raise OAuthError("invalid_grant", "Invalid refresh token")
        if stored.revoked:
            raise OAuthError("invalid_grant", "Refresh token revoked")
        if as_utc(stored.expires_at) < utcnow():
            raise OAuthError("invalid_grant", "Refresh token expired")
        if stored.client_id != client_id:
            raise OAuthError("invalid_grant", "Client ID mismatch")

        await self._authenticate_client(client_id, client_secret, stored.tenant_id)

        stored.revoked = True
        return await self.generate_access_token(
            client_id=client_id,
            tenant_id=stored.tenant_id,
            user_id=stored.user_id,
            scopes=stored.scopes,
        )

    async def revoke_refresh_token(self, token: str) -> None:
        stored = await self._get_refresh_token(token)
        if stored is None:
            raise OAuthError("invalid_grant", "Invalid refresh token")

        stored.revoked = True
        await self.db.commit()

    @staticmethod
    def verify_access_token(token: str) -> dict[str, Any]:
        """Decode an access token.

        Raises:
            OAuthError: invalid_token if the signature or expiry check fails
        """
        try:
            return jwt.decode(token, settings.oauth_secret, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            raise OAuthError("invalid_token", "Invalid token") from e

    @staticmethod
    def has_permission(payload: dict[str, Any], required_permission: str) -> bool:
        return required_permission in payload.get("permissions", [])
