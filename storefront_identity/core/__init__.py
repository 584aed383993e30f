"""Core app configuration and security primitives."""

from storefront_identity.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
