"""Auth service: registration, customer/provider login with status gate, admin login."""

import logging
from datetime import UTC, datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User, UserRole, UserStatus
from app.schemas.auth import RegisteredUser
from app.services.status import activate_fields, evaluate_status_gate

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
REGISTRABLE_ROLES = frozenset(r.value for r in UserRole)


def _require(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"Missing required field: {field}")
    return value


def register(
    session: Session,
    settings: Settings,
    *,
    name: str,
    email: str,
    password: str,
    role: str = UserRole.CUSTOMER.value,
) -> RegisteredUser:
    """
    Hash the password and insert a new active account.

    Raises ValidationError for absent fields or an unknown role and ConflictError
    when the email is already registered.
    """
    name = _require(name, "name").strip()
    email = _require(email, "email").strip()
    password = _require(password, "password")
    role = (role or UserRole.CUSTOMER.value).strip().lower()
    if role not in REGISTRABLE_ROLES:
        raise ValidationError(f"Invalid role: {role}")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        role=role,
        status=UserStatus.ACTIVE.value,
        suspended_until=None,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError("Email already registered") from e
    session.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "role": user.role})
    return RegisteredUser.model_validate(user)


def _reactivate_if_suspended(session: Session, user_id: int, now: datetime) -> int:
    """
    Lift a lapsed suspension. Keyed on status and end time so concurrent logins
    stay idempotent and a suspension renewed meanwhile is left alone.
    Returns the number of rows changed (0 when the row is no longer a lapsed suspension).
    """
    updated = (
        session.query(User)
        .filter(
            User.id == user_id,
            User.status == UserStatus.SUSPENDED.value,
            or_(User.suspended_until.is_(None), User.suspended_until <= now),
        )
        .update(activate_fields(), synchronize_session=False)
    )
    session.commit()
    if updated:
        logger.info("Suspension expired; user reactivated", extra={"user_id": user_id})
    return updated


def login(
    session: Session,
    settings: Settings,
    email: str,
    password: str,
    now: datetime | None = None,
) -> str:
    """
    Authenticate a customer/provider and return a signed token.

    Order: lookup (NotFoundError), status gate (ForbiddenError, lazy expiry),
    password check (UnauthorizedError).
    """
    now = now or datetime.now(UTC)
    user = session.query(User).filter(User.email == email).first()
    if user is None:
        raise NotFoundError("User not found")

    status = user.status
    if evaluate_status_gate(user.status, user.suspended_until, now):
        reactivated = _reactivate_if_suspended(session, user.id, now)
        session.refresh(user)
        if reactivated:
            status = UserStatus.ACTIVE.value
        else:
            # Status changed under us (banned or re-suspended); gate the fresh row.
            if evaluate_status_gate(user.status, user.suspended_until, now):
                raise ForbiddenError("Account status changed; try again.")
            status = user.status

    if not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid password")

    claims = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "status": status or UserStatus.ACTIVE.value,
    }
    logger.info("User logged in", extra={"user_id": user.id, "role": user.role})
    return create_access_token(claims, settings)


def admin_login(settings: Settings, email: str, password: str) -> str:
    """
    Compare against the configured static admin credential and return an admin token.

    The comparison is plain text against ADMIN_EMAIL / ADMIN_PASSWORD; there is no
    stored hash for the admin account.
    """
    if not (
        email == settings.ADMIN_EMAIL
        and password == settings.ADMIN_PASSWORD.get_secret_value()
    ):
        raise UnauthorizedError("Invalid credentials")
    logger.info("Admin logged in")
    return create_access_token({"role": ADMIN_ROLE, "email": email}, settings)
