"""Request/response schemas for admin user-management endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.database import as_utc


class UserOut(BaseModel):
    """User row as returned to admins. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    status: str = "active"
    suspended_until: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> str:
        return v or "active"

    @field_validator("suspended_until")
    @classmethod
    def normalize_suspended_until(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class SuspendRequest(BaseModel):
    """Optional suspension length in hours; anything unparseable falls back to 24."""

    duration: Any = None


class DeleteUserResponse(BaseModel):
    message: str = "User deleted"
    id: int


class SummaryStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(serialization_alias="totalUsers")
    active_users: int = Field(serialization_alias="activeUsers")
    suspended_users: int = Field(serialization_alias="suspendedUsers")
    banned_users: int = Field(serialization_alias="bannedUsers")


class SummaryResponse(BaseModel):
    """Response for GET /admin/summary."""

    message: str = "Welcome, Admin!"
    stats: SummaryStats
