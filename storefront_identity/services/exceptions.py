"""Errors raised by the identity services and mapped to HTTP status codes by the API layer."""


class IdentityError(Exception):
    """Base class for identity service failures."""


class EmailAlreadyRegisteredError(IdentityError):
    """Registration attempted for an email that already has an account (409)."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email already registered: {email}")
        self.email = email


class InvalidCredentialsError(IdentityError):
    """Unknown email or wrong password (401)."""


class UnknownRefreshTokenError(IdentityError):
    """Refresh token is not tracked by the store (401)."""
