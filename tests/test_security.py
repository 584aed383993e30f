"""Unit tests for storefront_identity.core.security: password hashing and access-token signing."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import SecretStr

from storefront_identity.core.config import Settings
from storefront_identity.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

# base64(SHA-256("password")), the legacy unsalted digest.
LEGACY_PASSWORD_DIGEST = "XohImNooBHFR0OVvjcYpJ3NgPQ1qq73WKhHvch0VQtg="


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {"BCRYPT_ROUNDS": 4}
    values.update(overrides)
    return Settings(**values)


class TestLegacyPasswordHash(unittest.TestCase):
    """PASSWORD_HASH_SCHEME=sha256 reproduces the unsalted deterministic digest."""

    def setUp(self) -> None:
        self.settings = _settings(PASSWORD_HASH_SCHEME="sha256")

    def test_known_vector(self) -> None:
        self.assertEqual(hash_password("password", self.settings), LEGACY_PASSWORD_DIGEST)

    def test_deterministic(self) -> None:
        self.assertEqual(
            hash_password("pw1", self.settings),
            hash_password("pw1", self.settings),
        )

    def test_verify_exact_password_only(self) -> None:
        hashed = hash_password("pw1", self.settings)
        self.assertTrue(verify_password("pw1", hashed))
        self.assertFalse(verify_password("pw2", hashed))
        self.assertFalse(verify_password("Pw1", hashed))
        self.assertFalse(verify_password("", hashed))


class TestBcryptPasswordHash(unittest.TestCase):
    """Default scheme: salted bcrypt, verified by checkpw."""

    def setUp(self) -> None:
        self.settings = _settings()

    def test_hash_is_salted(self) -> None:
        first = hash_password("secret", self.settings)
        second = hash_password("secret", self.settings)
        self.assertTrue(first.startswith("$2"))
        self.assertNotEqual(first, second)

    def test_verify_exact_password_only(self) -> None:
        hashed = hash_password("correct horse", self.settings)
        self.assertTrue(verify_password("correct horse", hashed))
        self.assertFalse(verify_password("correct hors", hashed))
        self.assertFalse(verify_password("correct horsE", hashed))

    def test_long_password_differing_after_72_bytes_rejected(self) -> None:
        hashed = hash_password("a" * 72 + "X" * 20, self.settings)
        self.assertTrue(verify_password("a" * 72 + "X" * 20, hashed))
        self.assertFalse(verify_password("a" * 72 + "Y" * 20, hashed))
        self.assertFalse(verify_password("a" * 72, hashed))

    def test_multibyte_password_fully_significant(self) -> None:
        password = "пароль" * 20 + "1"
        hashed = hash_password(password, self.settings)
        self.assertTrue(verify_password(password, hashed))
        self.assertFalse(verify_password("пароль" * 20 + "2", hashed))

    def test_legacy_hash_still_verifies_when_scheme_is_bcrypt(self) -> None:
        self.assertTrue(verify_password("password", LEGACY_PASSWORD_DIGEST))

    def test_malformed_bcrypt_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("x", "$2b$not-a-real-hash"))


class TestAccessToken(unittest.TestCase):
    """create_access_token / decode_access_token round trip and rejection rules."""

    def setUp(self) -> None:
        self.settings = _settings()
        self.user_id = uuid.uuid4()

    def _mint(self, settings: Settings | None = None, now: datetime | None = None) -> tuple[str, datetime]:
        kwargs = {}
        if now is not None:
            kwargs["now"] = lambda: now
        return create_access_token(
            sub=self.user_id,
            email="a@x.com",
            display_name="Ann",
            role="customer",
            settings=settings or self.settings,
            **kwargs,
        )

    def test_round_trip_claims(self) -> None:
        token, expires_at = self._mint()
        claims = decode_access_token(token, self.settings)
        self.assertEqual(claims["sub"], str(self.user_id))
        self.assertEqual(claims["email"], "a@x.com")
        self.assertEqual(claims["name"], "Ann")
        self.assertEqual(claims["role"], "customer")
        self.assertEqual(claims["iss"], "amigurumi.identity")
        self.assertEqual(claims["aud"], "amigurumi.clients")
        self.assertEqual(claims["exp"], int(expires_at.timestamp()))

    def test_expiry_is_configured_lifetime(self) -> None:
        now = datetime(2030, 1, 1, 12, 0, 0, 500000, tzinfo=UTC)
        _, expires_at = self._mint(settings=_settings(ACCESS_TOKEN_EXPIRE_MINUTES=15), now=now)
        self.assertEqual(expires_at, datetime(2030, 1, 1, 12, 15, 0, tzinfo=UTC))

    def test_accepted_before_expiry(self) -> None:
        issued = datetime.now(UTC) - timedelta(minutes=59)
        token, _ = self._mint(now=issued)
        self.assertEqual(decode_access_token(token, self.settings)["sub"], str(self.user_id))

    def test_rejected_after_expiry(self) -> None:
        issued = datetime.now(UTC) - timedelta(minutes=60, seconds=5)
        token, _ = self._mint(now=issued)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token, self.settings)

    def test_two_tokens_same_second_differ(self) -> None:
        now = datetime.now(UTC)
        first, _ = self._mint(now=now)
        second, _ = self._mint(now=now)
        self.assertNotEqual(first, second)

    def test_wrong_secret_rejected(self) -> None:
        token, _ = self._mint()
        other = _settings(JWT_SECRET=SecretStr("a-different-shared-secret-value-123"))
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(token, other)

    def test_wrong_audience_rejected(self) -> None:
        token, _ = self._mint()
        with self.assertRaises(jwt.InvalidAudienceError):
            decode_access_token(token, _settings(JWT_AUDIENCE="someone.else"))

    def test_wrong_issuer_rejected(self) -> None:
        token, _ = self._mint()
        with self.assertRaises(jwt.InvalidIssuerError):
            decode_access_token(token, _settings(JWT_ISSUER="rogue.identity"))

    def test_missing_role_claim_rejected(self) -> None:
        token = jwt.encode(
            {
                "sub": str(self.user_id),
                "email": "a@x.com",
                "iss": "amigurumi.identity",
                "aud": "amigurumi.clients",
                "exp": datetime.now(UTC) + timedelta(minutes=5),
            },
            self.settings.JWT_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token, self.settings)


class TestSettingsValidation(unittest.TestCase):
    """Settings validators reject unsafe or inconsistent configuration."""

    def test_short_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValueError):
            Settings(APP_ENV="prod", JWT_SECRET=SecretStr("short"))

    def test_non_hmac_algorithm_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Settings(JWT_ALGORITHM="RS256")

    def test_negative_session_limit_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Settings(MAX_REFRESH_SESSIONS_PER_USER=-1)


if __name__ == "__main__":
    unittest.main()
