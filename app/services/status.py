"""Account status lifecycle: the login status gate and admin-driven transitions.

States: active, suspended (with suspended_until), banned. Admin actions move
between them; the only other transition is lazy expiry of a suspension, which
happens when the account next logs in.
"""

import math
from datetime import datetime, timedelta
from typing import Any

from app.core.database import as_utc
from app.core.errors import ForbiddenError
from app.models.user import UserStatus

DEFAULT_SUSPEND_HOURS = 24

BANNED_MESSAGE = "Your account has been permanently banned."


def normalize_status(status: str | None) -> str:
    """Legacy rows may carry no status; treat them as active."""
    return (status or UserStatus.ACTIVE.value).lower()


def remaining_suspension_hours(suspended_until: datetime, now: datetime) -> int:
    """Whole hours left on a suspension, rounded up."""
    seconds = (as_utc(suspended_until) - as_utc(now)).total_seconds()
    return math.ceil(seconds / 3600)


def evaluate_status_gate(
    status: str | None,
    suspended_until: datetime | None,
    now: datetime,
) -> bool:
    """
    Apply the login status gate in order: banned, active suspension, expired suspension.

    Raises ForbiddenError for banned accounts and for suspensions still in force.
    Returns True when the account is suspended but the suspension has lapsed (or has
    no end), meaning the caller must reactivate it before continuing; False otherwise.
    """
    current = normalize_status(status)
    if current == UserStatus.BANNED.value:
        raise ForbiddenError(BANNED_MESSAGE)
    if current == UserStatus.SUSPENDED.value:
        until = as_utc(suspended_until)
        if until is not None and until > as_utc(now):
            hours = remaining_suspension_hours(until, now)
            raise ForbiddenError(
                f"Your account is suspended for another {hours} hour(s)."
            )
        return True
    return False


def suspension_fields(hours: int, now: datetime) -> dict[str, Any]:
    """Column values for a suspension lasting `hours` from `now`."""
    return {
        "status": UserStatus.SUSPENDED.value,
        "suspended_until": as_utc(now) + timedelta(hours=hours),
    }


def ban_fields() -> dict[str, Any]:
    return {"status": UserStatus.BANNED.value, "suspended_until": None}


def activate_fields() -> dict[str, Any]:
    return {"status": UserStatus.ACTIVE.value, "suspended_until": None}
