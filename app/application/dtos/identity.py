"""DTOs for identity mapping use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class UserIdentityCreate:
    """Data for a new (user_id, tenant_code) mapping."""

    user_id: str
    tenant_code: str
    user_info: dict[str, Any] = field(default_factory=dict)
    is_admin: bool = False


@dataclass(frozen=True)
class UserIdentityResult:
    """Identity record read-model (result of find_by_user_id, create, etc.)."""

    user_id: str
    tenant_code: str
    user_info: dict[str, Any]
    is_admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def external_user_id(self) -> str | None:
        """Chat platform user id recorded at signup."""
        value = self.user_info.get("external_user_id")
        return str(value) if value is not None else None


@dataclass(frozen=True)
class UserMappingResult:
    """External to internal id mapping returned by userMapping."""

    user_id: str
    external_user_id: str
