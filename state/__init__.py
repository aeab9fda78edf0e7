"""Session state utilities."""

from .profile_store import ProfileRepository, ProfileStore

__all__ = ["ProfileRepository", "ProfileStore"]
