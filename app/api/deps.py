"""Access dependencies: bearer-token principal, admin guard, app settings."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import (
    InvalidTokenError,
    decode_access_token,
    strip_registered_claims,
)
from app.schemas.auth import Principal

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Dependency: the Settings instance the app was built with."""
    return request.app.state.settings


def _authenticate(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing token")
    try:
        payload = decode_access_token(credentials.credentials, settings)
    except InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")
    try:
        principal = Principal.model_validate(strip_registered_claims(payload))
    except PydanticValidationError:
        raise UnauthorizedError("Invalid or expired token")
    request.state.principal = principal
    return principal


def get_current_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Principal:
    """Dependency: require a valid Bearer JWT and return its claims. Raises 401 if missing or invalid."""
    return _authenticate(request, credentials, settings)


def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Dependency: require a token with role 'admin'. Raises 403 otherwise."""
    if not principal.is_admin:
        raise ForbiddenError("Forbidden")
    return principal


def require_admin_for_status_changes(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Principal | None:
    """
    Guard for suspend/ban/activate. Same checks as require_admin unless
    STATUS_ROUTES_REQUIRE_AUTH is false, in which case the routes are open.
    """
    if not settings.STATUS_ROUTES_REQUIRE_AUTH:
        return None
    return require_admin(_authenticate(request, credentials, settings))
