"""Admin user management: list, delete, and status transitions (suspend, ban, activate)."""

import logging
import re
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models.user import User, UserStatus
from app.schemas.admin import SummaryStats, UserOut
from app.services.status import (
    DEFAULT_SUSPEND_HOURS,
    activate_fields,
    ban_fields,
    normalize_status,
    suspension_fields,
)

logger = logging.getLogger(__name__)

# Leading integer of a string, e.g. "72" or "12h" (sign allowed, rejected later if <= 0).
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")
# Plain ASCII integer ids only; int() alone would take "1_000" or non-ASCII digits.
_PLAIN_INT = re.compile(r"-?[0-9]+")


def parse_user_id(raw: Any) -> int:
    """Parse a path id as an integer; ValidationError before any storage access."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Invalid user id")
    text = str(raw).strip()
    if not _PLAIN_INT.fullmatch(text):
        raise ValidationError("Invalid user id")
    return int(text)


def resolve_suspend_hours(duration: Any) -> int:
    """Whole hours to suspend for; absent, non-numeric or non-positive means 24."""
    hours: int | None = None
    if duration is None or isinstance(duration, (bool, list, dict)):
        hours = None
    elif isinstance(duration, (int, float)):
        hours = int(duration)
    else:
        match = _LEADING_INT.match(str(duration))
        if match:
            hours = int(match.group(1))
    if not hours or hours <= 0:
        return DEFAULT_SUSPEND_HOURS
    return hours


def list_users(session: Session) -> list[UserOut]:
    """All users ordered by id ascending, without password hashes."""
    users = session.query(User).order_by(User.id).all()
    return [UserOut.model_validate(u) for u in users]


def summarize_users(session: Session) -> SummaryStats:
    """Account counts by status for the admin dashboard."""
    counts = {
        UserStatus.ACTIVE.value: 0,
        UserStatus.SUSPENDED.value: 0,
        UserStatus.BANNED.value: 0,
    }
    rows = session.query(User.status, func.count(User.id)).group_by(User.status).all()
    for status, count in rows:
        key = normalize_status(status)
        counts[key] = counts.get(key, 0) + count
    return SummaryStats(
        total_users=sum(counts.values()),
        active_users=counts[UserStatus.ACTIVE.value],
        suspended_users=counts[UserStatus.SUSPENDED.value],
        banned_users=counts[UserStatus.BANNED.value],
    )


def delete_user(session: Session, user_id: int) -> int:
    """Hard-delete a user by id. Raises NotFoundError when no row matched."""
    deleted = (
        session.query(User)
        .filter(User.id == user_id)
        .delete(synchronize_session=False)
    )
    session.commit()
    if not deleted:
        raise NotFoundError("User not found")
    logger.info("User deleted", extra={"user_id": user_id})
    return user_id


def _apply(session: Session, user_id: int, fields: dict[str, Any]) -> UserOut:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    for key, value in fields.items():
        setattr(user, key, value)
    session.commit()
    session.refresh(user)
    return UserOut.model_validate(user)


def suspend_user(
    session: Session,
    user_id: int,
    duration: Any = None,
    now: datetime | None = None,
) -> UserOut:
    """Suspend for `duration` hours (default 24) from now."""
    hours = resolve_suspend_hours(duration)
    now = now or datetime.now(UTC)
    updated = _apply(session, user_id, suspension_fields(hours, now))
    logger.info(
        "User suspended",
        extra={
            "user_id": user_id,
            "hours": hours,
            "suspended_until": updated.suspended_until.isoformat()
            if updated.suspended_until
            else None,
        },
    )
    return updated


def ban_user(session: Session, user_id: int) -> UserOut:
    updated = _apply(session, user_id, ban_fields())
    logger.info("User banned", extra={"user_id": user_id})
    return updated


def activate_user(session: Session, user_id: int) -> UserOut:
    updated = _apply(session, user_id, activate_fields())
    logger.info("User reactivated", extra={"user_id": user_id})
    return updated
