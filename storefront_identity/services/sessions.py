"""Register, login, refresh and logout flows over the credential store and token issuer."""

import logging

from storefront_identity.models.user import User
from storefront_identity.schemas.auth import TokenResponse
from storefront_identity.services.credential_store import CredentialStore
from storefront_identity.services.exceptions import (
    InvalidCredentialsError,
    UnknownRefreshTokenError,
)
from storefront_identity.services.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)


class SessionService:
    """
    Session state machine: Anonymous -> (register | login) -> Authenticated;
    Authenticated -> refresh -> Authenticated with the same refresh token.
    """

    def __init__(self, store: CredentialStore, issuer: TokenIssuer) -> None:
        self.store = store
        self.issuer = issuer

    def register(
        self,
        email: str,
        password: str,
        display_name: str,
        is_admin: bool = False,
    ) -> TokenResponse:
        """Create the account and log it in. Raises EmailAlreadyRegisteredError."""
        user = self.store.create_user(email, password, display_name, is_admin)
        return self.issuer.issue_tokens(user)

    def login(self, email: str, password: str) -> TokenResponse:
        """Raises InvalidCredentialsError for unknown email or wrong password alike."""
        user = self.store.get_by_email(email)
        if user is None or not self.store.verify_password(user, password):
            logger.info("Login failed", extra={"reason": "unknown_email" if user is None else "bad_password"})
            raise InvalidCredentialsError("Invalid email or password.")
        logger.info("Login succeeded", extra={"user_id": str(user.id)})
        return self.issuer.issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenResponse:
        """New access token for the user's current record; refresh token is not rotated."""
        user = self.store.get_by_refresh_token(refresh_token)
        if user is None:
            logger.info("Refresh rejected: unknown refresh token")
            raise UnknownRefreshTokenError("Unknown refresh token.")
        return self.issuer.issue_tokens(user, existing_refresh_token=refresh_token)

    def logout(self, refresh_token: str) -> bool:
        """Stop tracking refresh_token. Outstanding access tokens still expire naturally."""
        revoked = self.store.revoke_refresh_token(refresh_token)
        logger.info("Logout", extra={"revoked": revoked})
        return revoked

    def logout_all(self, user_id: str) -> int:
        """Stop tracking every refresh token of the user; return how many were dropped."""
        user = self.store.get_by_id(user_id)
        if user is None:
            return 0
        revoked = self.store.revoke_all_refresh_tokens(user.email)
        logger.info("Logout from all sessions", extra={"user_id": str(user.id), "revoked": revoked})
        return revoked

    def resolve(self, user_id: str) -> User | None:
        return self.store.get_by_id(user_id)
