"""Session endpoints: register, login, refresh, logout and me."""

from fastapi import APIRouter, HTTPException, Response, status

from storefront_identity.api.deps import CurrentPrincipal, Sessions
from storefront_identity.schemas.auth import (
    LoginRequest,
    MeResponse,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from storefront_identity.services.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UnknownRefreshTokenError,
)

router = APIRouter()


@router.post("/register", response_model=TokenResponse)
def register(body: RegisterRequest, sessions: Sessions) -> TokenResponse:
    """Create an account and return tokens; registration logs the user in."""
    try:
        return sessions.register(
            email=body.email,
            password=body.password,
            display_name=body.display_name,
            is_admin=body.is_admin,
        )
    except EmailAlreadyRegisteredError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered.",
        )


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, sessions: Sessions) -> TokenResponse:
    """
    Authenticate with email and password; returns an access/refresh token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    try:
        return sessions.login(body.email, body.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )


@router.post("/refresh", response_model=TokenResponse)
def refresh(body: RefreshRequest, sessions: Sessions) -> TokenResponse:
    """Exchange a refresh token for a new access token. The refresh token is returned unchanged."""
    try:
        return sessions.refresh(body.refresh_token)
    except UnknownRefreshTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token.",
        )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(body: RefreshRequest, sessions: Sessions) -> Response:
    """Stop accepting the refresh token. Idempotent: unknown tokens also return 204."""
    sessions.logout(body.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout-all", status_code=status.HTTP_204_NO_CONTENT)
def logout_all(principal: CurrentPrincipal, sessions: Sessions) -> Response:
    """Drop every refresh token of the token's subject (sign out on all devices)."""
    sessions.logout_all(str(principal.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=MeResponse)
def me(principal: CurrentPrincipal, sessions: Sessions) -> MeResponse:
    """Profile of the token's subject; 401 if the subject no longer exists (e.g. after restart)."""
    user = sessions.resolve(str(principal.id))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return MeResponse(
        user_id=user.id,
        email=user.email,
        display_name=user.display_name,
        role=user.role,
    )
