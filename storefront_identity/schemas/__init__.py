"""Pydantic request/response schemas."""

from storefront_identity.schemas.auth import (
    LoginRequest,
    MeResponse,
    Principal,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from storefront_identity.schemas.health import HealthResponse

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "Principal",
    "RefreshRequest",
    "RegisterRequest",
    "TokenResponse",
]
