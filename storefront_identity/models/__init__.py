"""Domain records held by the identity service."""

from storefront_identity.models.user import Role, User, normalize_email

__all__ = ["Role", "User", "normalize_email"]
