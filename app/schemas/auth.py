"""Request/response schemas for auth endpoints, plus the verified token claims."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
)
from app.models.enums import RoleName


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RegisterRequest(BaseModel):
    """Self-service registration; the account receives the USER role."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, pattern=USERNAME_PATTERN
    )
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=20)


class AdminRegistrationRequest(RegisterRequest):
    """Admin registration; admin_secret_key is required once any admin exists."""

    admin_secret_key: str | None = Field(
        default=None,
        max_length=255,
        description="Shared admin secret; optional when no admin exists or caller is admin",
    )


class AuthClaims(BaseModel):
    """Verified identity decoded from a bearer token. Rebuilt on every request."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str
    roles: frozenset[RoleName]
    issued_at: datetime
    expires_at: datetime


class AuthResponse(BaseModel):
    """JWT access token and identity returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_at: datetime
    user_id: int
    username: str
    email: str
    roles: list[RoleName]
