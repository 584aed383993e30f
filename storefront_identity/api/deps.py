"""
Authorization contract dependencies.

Any storefront service configured with the same JWT_ISSUER, JWT_AUDIENCE and
JWT_SECRET can use these to authenticate requests locally, without calling
the identity service.
"""

import uuid
from datetime import UTC, datetime
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront_identity.core.config import Settings, get_settings
from storefront_identity.core.security import decode_access_token
from storefront_identity.schemas.auth import Principal
from storefront_identity.services.credential_store import CredentialStore
from storefront_identity.services.sessions import SessionService
from storefront_identity.services.token_issuer import TokenIssuer

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@lru_cache
def get_session_service() -> SessionService:
    """Process-wide session service (in-memory store lives as long as the process)."""
    settings = get_settings()
    store = CredentialStore(settings)
    return SessionService(store, TokenIssuer(store, settings))


def principal_from_claims(payload: dict) -> Principal:
    """Build a Principal from verified claims; raise ValueError if they are malformed."""
    try:
        return Principal(
            id=uuid.UUID(str(payload["sub"])),
            email=payload["email"],
            display_name=payload.get("name", ""),
            role=payload["role"],
            expires_at_utc=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid token payload: {e}") from e


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Principal:
    """Dependency: require a valid Bearer JWT. Raises 401 if missing, invalid or expired."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials, settings)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        return principal_from_claims(payload)
    except ValueError:
        raise _unauthorized("Invalid token payload")


def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Dependency: require role 'admin'. Raises 403 for other roles."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal


def ensure_owner_or_admin(principal: Principal, owner_id: uuid.UUID) -> None:
    """Raise 403 unless principal owns the resource or is an admin."""
    if principal.is_admin or principal.id == owner_id:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Not allowed to access this resource",
    )


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
AdminPrincipal = Annotated[Principal, Depends(require_admin)]
Sessions = Annotated[SessionService, Depends(get_session_service)]
