"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.identity import UserIdentityCreate, UserIdentityResult


# Identity store interface
class IUserIdentityRepository(Protocol):
    """Protocol for the tenant-scoped identity store (DIP).

    Every method takes tenant_code; soft-deleted rows are never returned.
    """

    async def create(self, data: UserIdentityCreate) -> UserIdentityResult:
        """Insert a mapping. Raises DuplicateKeyException if a live row exists."""

    async def find_by_user_id(
        self, user_id: str, tenant_code: str
    ) -> UserIdentityResult | None:
        """Return the live record for (user_id, tenant_code)."""

    async def find_by_external_id(
        self, external_user_id: str, tenant_code: str
    ) -> UserIdentityResult | None:
        """Return the live record whose user_info.external_user_id matches."""

    async def update(
        self, user_id: str, tenant_code: str, patch: dict[str, Any]
    ) -> int:
        """Apply column patch to the live record; return affected row count."""

    async def soft_delete(self, user_id: str, tenant_code: str) -> int:
        """Mark the live record deleted; return affected row count."""
