"""Request/response schemas for user management."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
)
from app.models.enums import RoleName


class UserResponse(BaseModel):
    """User as returned by the API (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    is_active: bool
    roles: list[RoleName]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, v: object) -> object:
        # ORM Role rows -> their names, sorted for stable output
        if isinstance(v, (list, tuple, set, frozenset)):
            return sorted(RoleName(getattr(r, "name", r)) for r in v)
        return v


class UserUpdateRequest(BaseModel):
    """Full update of profile fields; password is changed only when provided."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, pattern=USERNAME_PATTERN
    )
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=20)
