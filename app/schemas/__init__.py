"""Pydantic request/response schemas."""

from app.schemas.admin import (
    DeleteUserResponse,
    SummaryResponse,
    SummaryStats,
    SuspendRequest,
    UserOut,
)
from app.schemas.auth import (
    LoginRequest,
    Principal,
    RegisteredUser,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from app.schemas.health import DbCheckResponse

__all__ = [
    "DbCheckResponse",
    "DeleteUserResponse",
    "LoginRequest",
    "Principal",
    "RegisteredUser",
    "RegisterRequest",
    "RegisterResponse",
    "SummaryResponse",
    "SummaryStats",
    "SuspendRequest",
    "TokenResponse",
    "UserOut",
]
