"""Mint access/refresh token pairs and bind refresh tokens to users."""

import base64
import logging
import secrets
from collections.abc import Callable
from datetime import datetime

from storefront_identity.core.config import Settings, get_settings
from storefront_identity.core.security import create_access_token, utc_now
from storefront_identity.models.user import User
from storefront_identity.schemas.auth import TokenResponse
from storefront_identity.services.credential_store import CredentialStore
from storefront_identity.services.exceptions import UnknownRefreshTokenError

logger = logging.getLogger(__name__)

# Entropy of a new refresh token before base64 rendering.
REFRESH_TOKEN_BYTES = 48


def new_refresh_token() -> str:
    """Cryptographically random opaque refresh token."""
    return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")


class TokenIssuer:
    """Issues tokens for users held by a CredentialStore. Never stores access tokens."""

    def __init__(
        self,
        store: CredentialStore,
        settings: Settings | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self.settings = settings or get_settings()
        self._now = now

    def issue_tokens(self, user: User, existing_refresh_token: str | None = None) -> TokenResponse:
        """
        Mint a new access token for user's current record.

        existing_refresh_token is reused verbatim (refresh flow); otherwise a
        new refresh token is generated (register/login).

        Raises UnknownRefreshTokenError if existing_refresh_token was revoked
        or evicted after the caller looked it up.
        """
        refresh_token = existing_refresh_token or new_refresh_token()
        if not self._store.track_refresh_token(
            user, refresh_token, must_exist=existing_refresh_token is not None
        ):
            raise UnknownRefreshTokenError("Refresh token revoked.")
        access_token, expires_at = create_access_token(
            sub=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role.value,
            settings=self.settings,
            now=self._now,
        )
        logger.debug(
            "Issued tokens",
            extra={"user_id": str(user.id), "reused_refresh": existing_refresh_token is not None},
        )
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at_utc=expires_at,
        )
