"""Password hashing and JWT creation/verification shared by every storefront service."""

import base64
import hashlib
import hmac
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from storefront_identity.core.config import Settings, get_settings

# Min/max lengths for request validation.
EMAIL_MAX_LEN = 255
DISPLAY_NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128

# Claims every access token must carry to pass the authorization contract.
REQUIRED_CLAIMS = ["sub", "email", "role", "exp", "iss", "aud"]


def _legacy_digest(plain_password: str) -> str:
    """Unsalted base64(SHA-256) digest kept for compatibility with existing hashes."""
    digest = hashlib.sha256(plain_password.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def _bcrypt_input(plain_password: str) -> bytes:
    """
    44-byte bcrypt input. bcrypt ignores bytes past 72, so long passwords are
    pre-hashed to keep every character significant.
    """
    return _legacy_digest(plain_password).encode("ascii")


def _is_bcrypt_hash(hashed: str) -> bool:
    return hashed.startswith("$2")


def hash_password(plain_password: str, settings: Settings | None = None) -> str:
    """Hash a plain-text password for storage using PASSWORD_HASH_SCHEME."""
    settings = settings or get_settings()
    if settings.PASSWORD_HASH_SCHEME == "sha256":
        return _legacy_digest(plain_password)
    pw_bytes = _bcrypt_input(plain_password)
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    The scheme is read from the stored hash, not from settings, so users
    created before a PASSWORD_HASH_SCHEME change can still log in.
    """
    if _is_bcrypt_hash(hashed):
        pw_bytes = _bcrypt_input(plain_password)
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False
    return hmac.compare_digest(
        _legacy_digest(plain_password).encode("ascii"), hashed.encode("utf-8")
    )


def utc_now() -> datetime:
    return datetime.now(UTC)


def create_access_token(
    sub: str | uuid.UUID,
    email: str,
    display_name: str,
    role: str,
    settings: Settings | None = None,
    now: Callable[[], datetime] = utc_now,
) -> tuple[str, datetime]:
    """
    Create a signed JWT access token for one user.

    Returns (token, expires_at_utc). Expiry is truncated to whole seconds so
    it matches the encoded exp claim exactly.
    """
    settings = settings or get_settings()
    issued_at = now().replace(microsecond=0)
    expire = issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": email,
        "name": display_name,
        "role": role,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": issued_at,
        "exp": expire,
        # Distinguishes tokens minted for the same user within one second.
        "jti": uuid.uuid4().hex,
    }
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expire


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and validate a JWT access token; return its claims.

    Checks signature, issuer, audience and expiry against the shared
    configuration. Raises jwt.PyJWTError on any failure.
    """
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"require": REQUIRED_CLAIMS},
    )
