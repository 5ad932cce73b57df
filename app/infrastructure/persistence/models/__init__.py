"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import (
    AuditedModel,
    SoftDeleteMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.user_identity import UserIdentity

__all__ = [
    "UserIdentity",
    "AuditedModel",
    "SoftDeleteMixin",
    "TimestampMixin",
]
