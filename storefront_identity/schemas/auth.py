"""Request/response schemas for auth endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront_identity.core.security import (
    DISPLAY_NAME_MAX_LEN,
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from storefront_identity.models.user import Role


class CamelModel(BaseModel):
    """Serializes to camelCase for the storefront frontends; accepts either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """New account details. Registration also logs the user in."""

    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    display_name: str = Field(..., min_length=1, max_length=DISPLAY_NAME_MAX_LEN)
    is_admin: bool = Field(default=False, description="Grant the admin role")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("displayName must not be blank")
        return v


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class RefreshRequest(CamelModel):
    """Refresh token previously returned by register, login or refresh."""

    refresh_token: str = Field(..., min_length=1, max_length=512)


class TokenResponse(CamelModel):
    """Access/refresh token pair returned by register, login and refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token")
    expires_at_utc: datetime = Field(..., description="Access token expiry (UTC)")


class MeResponse(CamelModel):
    """Profile of the authenticated user."""

    user_id: uuid.UUID
    email: str
    display_name: str
    role: Role


class Principal(BaseModel):
    """Identity asserted by a verified access token (no store lookup)."""

    id: uuid.UUID
    email: str
    display_name: str
    role: Role
    expires_at_utc: datetime

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
