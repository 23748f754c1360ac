"""
Developer API OAuth 2.0 Endpoints

Client registration for third-party integrations and the authorization
code flow (authorize, token, revoke, introspect).
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import OAuthClient, User, UserRole
from edpsych.core.schemas import (
    AuthorizeRequest,
    AuthorizeResponse,
    IntrospectionResponse,
    OAuthClientCreate,
    OAuthClientCreated,
    OAuthClientSchema,
    OAuthClientUpdate,
    OAuthTokenResponse,
    RevokeRequest,
)
from edpsych.core.security import get_current_user, require_roles
from edpsych.developer import OAuthError, OAuthService

router = APIRouter()

api_token_scheme = HTTPBearer(auto_error=False)

CLIENT_MANAGERS = (UserRole.ADMIN, UserRole.TEACHER)

OAUTH_ERROR_STATUS = {
    "invalid_client": status.HTTP_401_UNAUTHORIZED,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "invalid_grant": status.HTTP_400_BAD_REQUEST,
    "invalid_request": status.HTTP_400_BAD_REQUEST,
    "invalid_scope": status.HTTP_400_BAD_REQUEST,
    "unsupported_grant_type": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
}


def oauth_http_error(error: OAuthError) -> HTTPException:
    """Translate an OAuthError into an HTTP error with an RFC 6749 body."""
    return HTTPException(
        status_code=OAUTH_ERROR_STATUS.get(error.error, status.HTTP_400_BAD_REQUEST),
        detail={"error": error.error, "error_description": error.description},
    )


# ----------------------------------------------------------------------
# Client management
# ----------------------------------------------------------------------


@router.post("/clients", response_model=OAuthClientCreated, status_code=status.HTTP_201_CREATED)
async def register_client(
    client_data: OAuthClientCreate,
    current_user: User = Depends(require_roles(*CLIENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Register a client. The secret is returned only in this response."""
    service = OAuthService(db)
    try:
        client, client_secret = await service.register_client(
            tenant_id=current_user.effective_tenant,
            name=client_data.name,
            description=client_data.description,
            redirect_uris=client_data.redirect_uris,
            allowed_scopes=client_data.allowed_scopes,
            created_by=current_user.id,
        )
    except OAuthError as e:
        raise oauth_http_error(e) from e

    return {"client": client, "client_secret": client_secret}


@router.get("/clients", response_model=list[OAuthClientSchema])
async def list_clients(
    current_user: User = Depends(require_roles(*CLIENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
) -> list[OAuthClient]:
    """List the caller's tenant's clients."""
    return await OAuthService(db).list_clients(current_user.effective_tenant)


@router.patch("/clients/{client_id}", response_model=OAuthClientSchema)
async def update_client(
    client_id: str,
    client_update: OAuthClientUpdate,
    current_user: User = Depends(require_roles(*CLIENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
) -> OAuthClient:
    try:
        return await OAuthService(db).update_client(
            client_id,
            current_user.effective_tenant,
            client_update.model_dump(exclude_unset=True),
        )
    except OAuthError as e:
        raise oauth_http_error(e) from e


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    current_user: User = Depends(require_roles(*CLIENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await OAuthService(db).delete_client(client_id, current_user.effective_tenant)
    except OAuthError as e:
        raise oauth_http_error(e) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Authorization code flow
# ----------------------------------------------------------------------


@router.post("/authorize", response_model=AuthorizeResponse)
async def authorize(
    request: AuthorizeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Issue an authorization code for the signed-in user."""
    try:
        code = await OAuthService(db).generate_authorization_code(
            client_id=request.client_id,
            tenant_id=current_user.effective_tenant,
            user_id=current_user.id,
            scopes=request.scopes,
            redirect_uri=request.redirect_uri,
        )
    except OAuthError as e:
        raise oauth_http_error(e) from e

    return {"code": code, "redirect_uri": request.redirect_uri, "state": request.state}


@router.post("/token", response_model=OAuthTokenResponse)
async def token(
    grant_type: str = Form(...),
    client_id: str = Form(...),
    client_secret: str = Form(...),
    code: str | None = Form(default=None),
    redirect_uri: str | None = Form(default=None),
    refresh_token: str | None = Form(default=None),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Token endpoint (form encoded).

    Supports `authorization_code` and `refresh_token` grants.
    """
    service = OAuthService(db)
    try:
        if grant_type == "authorization_code":
            if not code or not redirect_uri:
                raise OAuthError("invalid_request", "code and redirect_uri are required")
            return await service.exchange_authorization_code(
                code=code,
                client_id=client_id,
                client_secret=client_secret,
                redirect_uri=redirect_uri,
            )

        if grant_type == "refresh_token":
            if not refresh_token:
                raise OAuthError("invalid_request", "refresh_token is required")
            return await service.refresh_access_token(
                refresh_token=refresh_token,
                client_id=client_id,
                client_secret=client_secret,
            )

        raise OAuthError("unsupported_grant_type", f"Unsupported grant type: {grant_type}")
    except OAuthError as e:
        raise oauth_http_error(e) from e


@router.post("/revoke")
async def revoke(request: RevokeRequest, db: AsyncSession = Depends(get_db)) -> dict[str, bool]:
    """Revoke a refresh token."""
    try:
        await OAuthService(db).revoke_refresh_token(request.refresh_token)
    except OAuthError as e:
        raise oauth_http_error(e) from e

    return {"revoked": True}


@router.get("/introspect", response_model=IntrospectionResponse)
async def introspect(
    credentials: HTTPAuthorizationCredentials | None = Depends(api_token_scheme),
) -> dict[str, Any]:
    """Validate a developer API access token and return its claims."""
    if credentials is None:
        raise oauth_http_error(OAuthError("invalid_token", "Missing bearer token"))

    try:
        payload = OAuthService.verify_access_token(credentials.credentials)
    except OAuthError as e:
        raise oauth_http_error(e) from e

    return {"active": True, "payload": payload}
