"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.user_identity_repo import (
    UserIdentityRepository,
)

__all__ = [
    "BaseRepository",
    "UserIdentityRepository",
]
