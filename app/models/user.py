"""ORM model for application users (credential store and account status)."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, func

from app.models.base import Base


class UserRole(str, enum.Enum):
    """Roles a registered account can hold. Admin is never stored; it comes from config."""

    CUSTOMER = "customer"
    PROVIDER = "provider"


class UserStatus(str, enum.Enum):
    """Account status; exactly one holds at any time."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class User(Base):
    """
    Registered account.

    status: 'active', 'suspended' or 'banned'. suspended_until is set only while
    status is 'suspended' and is cleared on every transition away from it.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'suspended', 'banned')", name="status"
        ),
        CheckConstraint(
            "suspended_until IS NULL OR status = 'suspended'",
            name="suspended_until_only_when_suspended",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.CUSTOMER.value)
    status = Column(
        String(16),
        nullable=False,
        default=UserStatus.ACTIVE.value,
        server_default=UserStatus.ACTIVE.value,
    )
    suspended_until = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
