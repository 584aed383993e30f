"""Thread-safe in-memory store for user records and the refresh-token index."""

import logging
import threading
import uuid

from storefront_identity.core.config import Settings, get_settings
from storefront_identity.core.security import hash_password
from storefront_identity.core.security import verify_password as _verify_password
from storefront_identity.models.user import Role, User, normalize_email
from storefront_identity.services.exceptions import EmailAlreadyRegisteredError

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Users keyed by normalized email, plus refresh token -> email index.

    A single re-entrant lock guards both maps. Registration is an atomic
    insert-if-absent, so two concurrent registrations of one email yield
    exactly one user. State lives for the process lifetime only.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._lock = threading.RLock()
        self._users_by_email: dict[str, User] = {}
        self._refresh_index: dict[str, str] = {}
        # Insertion-ordered so the oldest session is evicted first.
        self._sessions_by_email: dict[str, dict[str, None]] = {}

    def exists(self, email: str) -> bool:
        with self._lock:
            return normalize_email(email) in self._users_by_email

    def count(self) -> int:
        with self._lock:
            return len(self._users_by_email)

    def create_user(
        self,
        email: str,
        password: str,
        display_name: str,
        is_admin: bool = False,
    ) -> User:
        """
        Create and store a user; raise EmailAlreadyRegisteredError if taken.

        The password is hashed before the lock is taken so slow hashing does
        not serialize unrelated registrations.
        """
        key = normalize_email(email)
        user = User(
            email=key,
            display_name=display_name.strip(),
            role=Role.ADMIN if is_admin else Role.CUSTOMER,
            password_hash=hash_password(password, self._settings),
        )
        with self._lock:
            if key in self._users_by_email:
                raise EmailAlreadyRegisteredError(key)
            self._users_by_email[key] = user
        logger.info(
            "User registered",
            extra={"user_id": str(user.id), "role": user.role.value},
        )
        return user

    def get_by_email(self, email: str) -> User | None:
        with self._lock:
            return self._users_by_email.get(normalize_email(email))

    def get_by_id(self, user_id: uuid.UUID | str) -> User | None:
        """Linear scan over all users; the population is small."""
        try:
            wanted = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
        except ValueError:
            return None
        with self._lock:
            users = list(self._users_by_email.values())
        for user in users:
            if user.id == wanted:
                return user
        return None

    def verify_password(self, user: User, candidate_password: str) -> bool:
        return _verify_password(candidate_password, user.password_hash)

    def get_by_refresh_token(self, refresh_token: str) -> User | None:
        with self._lock:
            email = self._refresh_index.get(refresh_token)
            if email is None:
                return None
            return self._users_by_email.get(email)

    def track_refresh_token(self, user: User, refresh_token: str, must_exist: bool = False) -> bool:
        """
        Map refresh_token to user, adding it to the user's tracked sessions.

        Re-tracking a token already held by the user (the refresh flow) keeps
        it in place. When MAX_REFRESH_SESSIONS_PER_USER is reached, the
        oldest tracked token is dropped from the index.

        With must_exist, the token must still map to user when the lock is
        taken; otherwise nothing changes and False is returned. A logout or
        eviction that lands during a refresh therefore stays in effect.
        """
        limit = self._settings.MAX_REFRESH_SESSIONS_PER_USER
        evicted = 0
        with self._lock:
            if must_exist and self._refresh_index.get(refresh_token) != user.email:
                return False
            previous_owner = self._refresh_index.get(refresh_token)
            if previous_owner is not None and previous_owner != user.email:
                self._sessions_by_email.get(previous_owner, {}).pop(refresh_token, None)
            sessions = self._sessions_by_email.setdefault(user.email, {})
            if refresh_token not in sessions and limit:
                while len(sessions) >= limit:
                    oldest = next(iter(sessions))
                    del sessions[oldest]
                    self._refresh_index.pop(oldest, None)
                    evicted += 1
            sessions[refresh_token] = None
            self._refresh_index[refresh_token] = user.email
        if evicted:
            logger.info(
                "Evicted oldest refresh sessions",
                extra={"user_id": str(user.id), "evicted": evicted},
            )
        return True

    def revoke_refresh_token(self, refresh_token: str) -> bool:
        """Remove one refresh token; return False if it was not tracked."""
        with self._lock:
            email = self._refresh_index.pop(refresh_token, None)
            if email is None:
                return False
            self._sessions_by_email.get(email, {}).pop(refresh_token, None)
            return True

    def revoke_all_refresh_tokens(self, email: str) -> int:
        """Remove every refresh token tracked for the user; return how many."""
        with self._lock:
            sessions = self._sessions_by_email.pop(normalize_email(email), {})
            for token in sessions:
                self._refresh_index.pop(token, None)
            return len(sessions)

    def refresh_tokens_for(self, email: str) -> list[str]:
        with self._lock:
            return list(self._sessions_by_email.get(normalize_email(email), {}))
