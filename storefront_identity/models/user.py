"""In-memory user record for authentication and role-based access control."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class Role(str, Enum):
    """Permission tier carried in the access token's role claim."""

    ADMIN = "admin"
    CUSTOMER = "customer"


def normalize_email(email: str) -> str:
    """Canonical key for email lookups: trimmed and lower-cased."""
    return email.strip().lower()


@dataclass(frozen=True)
class User:
    """
    User account. Immutable after registration: no endpoint changes role,
    email or password.

    password_hash is never serialized into responses or logs.
    """

    email: str
    display_name: str
    role: Role
    password_hash: str = field(repr=False)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
