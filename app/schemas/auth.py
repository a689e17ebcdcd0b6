"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for customer/provider or admin login."""

    email: str = Field(..., max_length=255, description="Account email (login key)")
    password: str = Field(..., max_length=128, description="Password")


class RegisterRequest(BaseModel):
    """New account details."""

    name: str = Field(..., max_length=255, description="Display name")
    email: str = Field(..., max_length=255, description="Account email (must be unique)")
    password: str = Field(..., max_length=128, description="Password")
    role: str = Field(default="customer", description="customer or provider")


class TokenResponse(BaseModel):
    """Signed bearer token returned after successful login."""

    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")


class RegisteredUser(BaseModel):
    """Identity of a freshly registered account (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str


class RegisterResponse(BaseModel):
    message: str = "User registered"
    user: RegisteredUser


class Principal(BaseModel):
    """Decoded token claims attached to the request for downstream handlers."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    email: str | None = None
    role: str
    status: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
