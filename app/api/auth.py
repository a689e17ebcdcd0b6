"""Registration, customer/provider login and static admin login."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_app_settings
from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import ConflictError, InternalError, NotFoundError, UnauthorizedError
from app.schemas.auth import LoginRequest, RegisterRequest, RegisterResponse, TokenResponse
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(
    body: LoginRequest,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenResponse:
    """Log in with the configured admin credential; returns a token with role 'admin'."""
    token = auth_service.admin_login(settings, body.email, body.password)
    return TokenResponse(token=token)


@router.post("/register", response_model=RegisterResponse)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RegisterResponse:
    """Create a customer or provider account. Duplicate emails surface as a generic failure."""
    try:
        user = auth_service.register(
            db,
            settings,
            name=body.name,
            email=body.email,
            password=body.password,
            role=body.role,
        )
    except ConflictError as e:
        logger.warning("Registration failed", extra={"reason": e.message})
        raise InternalError("Registration failed") from e
    return RegisterResponse(message="User registered", user=user)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenResponse:
    """
    Log in a customer or provider. Banned and currently suspended accounts get 403;
    a lapsed suspension is lifted before the password is checked.
    """
    try:
        token = auth_service.login(db, settings, body.email, body.password)
    except NotFoundError as e:
        raise UnauthorizedError(e.message) from e
    return TokenResponse(token=token)
