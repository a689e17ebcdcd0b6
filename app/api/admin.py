"""Admin-only endpoints: dashboard summary and user management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_admin_for_status_changes
from app.core.database import get_db
from app.schemas.admin import (
    DeleteUserResponse,
    SummaryResponse,
    SuspendRequest,
    UserOut,
)
from app.schemas.auth import Principal
from app.services import users as users_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SummaryResponse:
    """Greeting plus account counts by status."""
    logger.info("Admin summary requested", extra={"admin_email": admin.email})
    return SummaryResponse(stats=users_service.summarize_users(db))


@router.get("/users", response_model=list[UserOut])
def list_users(
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    """All users ordered by id, without password hashes."""
    return users_service.list_users(db)


@router.delete("/users/{user_id}", response_model=DeleteUserResponse)
def delete_user(
    user_id: str,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DeleteUserResponse:
    """Hard-delete a user. 400 for a non-integer id, 404 when nothing matched."""
    uid = users_service.parse_user_id(user_id)
    deleted_id = users_service.delete_user(db, uid)
    return DeleteUserResponse(message="User deleted", id=deleted_id)


@router.post(
    "/users/{user_id}/suspend",
    response_model=UserOut,
    dependencies=[Depends(require_admin_for_status_changes)],
)
def suspend_user(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
    body: SuspendRequest | None = None,
) -> UserOut:
    """Suspend for body.duration hours (24 when absent or not a number)."""
    uid = users_service.parse_user_id(user_id)
    duration = body.duration if body is not None else None
    return users_service.suspend_user(db, uid, duration)


@router.post(
    "/users/{user_id}/ban",
    response_model=UserOut,
    dependencies=[Depends(require_admin_for_status_changes)],
)
def ban_user(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    uid = users_service.parse_user_id(user_id)
    return users_service.ban_user(db, uid)


@router.post(
    "/users/{user_id}/activate",
    response_model=UserOut,
    dependencies=[Depends(require_admin_for_status_changes)],
)
def activate_user(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    uid = users_service.parse_user_id(user_id)
    return users_service.activate_user(db, uid)
