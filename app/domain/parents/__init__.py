"""Registered parents (identities authenticated by email)."""

from .services import ParentDirectory, normalize_email, serialize_parent

__all__ = [
    "ParentDirectory",
    "normalize_email",
    "serialize_parent",
]
