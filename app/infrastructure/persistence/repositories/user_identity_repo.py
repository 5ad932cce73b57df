"""User identity repository. Tenant-scoped; interface methods return application DTOs."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.identity import UserIdentityCreate, UserIdentityResult
from app.domain.exceptions import DuplicateKeyException, ValidationException
from app.infrastructure.persistence.models.user_identity import UserIdentity
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Columns callers may patch through update(); keys are never interpolated into SQL.
_UPDATABLE_COLUMNS = frozenset({"user_info", "is_admin"})


def _identity_to_result(row: UserIdentity) -> UserIdentityResult:
    """Map ORM UserIdentity to application UserIdentityResult."""
    return UserIdentityResult(
        user_id=row.user_id,
        tenant_code=row.tenant_code,
        user_info=dict(row.user_info or {}),
        is_admin=row.is_admin,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class UserIdentityRepository(BaseRepository[UserIdentity]):
    """Identity store. create, find_by_user_id, find_by_external_id, update, soft_delete.

    The composite primary key (user_id, tenant_code) is the arbiter for
    concurrent signups: the loser's INSERT fails with IntegrityError, which
    is translated into DuplicateKeyException.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserIdentity)

    def _live(self, tenant_code: str):
        """Base select for non-deleted rows in tenant."""
        return select(UserIdentity).where(
            UserIdentity.tenant_code == tenant_code,
            UserIdentity.deleted_at.is_(None),
        )

    async def create(self, data: UserIdentityCreate) -> UserIdentityResult:
        """Insert mapping; revive a soft-deleted row for the same key.

        Runs in a SAVEPOINT so a unique violation leaves the outer
        transaction usable (the caller reads the winner's row next).

        Raises:
            DuplicateKeyException: A live row exists for (user_id, tenant_code).
        """
        try:
            async with self.db.begin_nested():
                existing = await self.get_by_pk(data.user_id, data.tenant_code)
                if existing is None:
                    row = await self.add(
                        UserIdentity(
                            user_id=data.user_id,
                            tenant_code=data.tenant_code,
                            user_info=dict(data.user_info),
                            is_admin=data.is_admin,
                        )
                    )
                    return _identity_to_result(row)
                if existing.deleted_at is None:
                    raise DuplicateKeyException(data.user_id, data.tenant_code)
                existing.user_info = dict(data.user_info)
                existing.is_admin = data.is_admin
                existing.deleted_at = None
                await self.db.flush()
                await self.db.refresh(existing)
                logger.info(
                    "Revived soft-deleted identity user_id=%s tenant=%s",
                    data.user_id,
                    data.tenant_code,
                )
                return _identity_to_result(existing)
        except IntegrityError:
            raise DuplicateKeyException(data.user_id, data.tenant_code)

    async def find_by_user_id(
        self, user_id: str, tenant_code: str
    ) -> UserIdentityResult | None:
        result = await self.db.execute(
            self._live(tenant_code).where(UserIdentity.user_id == user_id)
        )
        row = result.scalar_one_or_none()
        return _identity_to_result(row) if row else None

    async def find_by_external_id(
        self, external_user_id: str, tenant_code: str
    ) -> UserIdentityResult | None:
        """Match user_info->>'external_user_id' with a bound parameter."""
        result = await self.db.execute(
            self._live(tenant_code)
            .where(UserIdentity.user_info["external_user_id"].astext == external_user_id)
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _identity_to_result(row) if row else None

    async def update(
        self, user_id: str, tenant_code: str, patch: dict[str, Any]
    ) -> int:
        """Patch user_info and/or is_admin on the live row; return affected count."""
        unknown = set(patch) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValidationException(
                f"Cannot update columns: {', '.join(sorted(unknown))}", "patch"
            )
        if not patch:
            return 0
        result = await self.db.execute(
            update(UserIdentity)
            .where(
                UserIdentity.user_id == user_id,
                UserIdentity.tenant_code == tenant_code,
                UserIdentity.deleted_at.is_(None),
            )
            .values(**patch)
        )
        return result.rowcount

    async def soft_delete(self, user_id: str, tenant_code: str) -> int:
        result = await self.db.execute(
            update(UserIdentity)
            .where(
                UserIdentity.user_id == user_id,
                UserIdentity.tenant_code == tenant_code,
                UserIdentity.deleted_at.is_(None),
            )
            .values(deleted_at=utc_now())
        )
        return result.rowcount

    async def list_missing_tenant(self, limit: int = 1000) -> list[str]:
        """Return user_ids of legacy rows with no tenant_code (pre-backfill schema)."""
        result = await self.db.execute(
            select(UserIdentity.user_id)
            .where(UserIdentity.tenant_code.is_(None))
            .order_by(UserIdentity.user_id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def backfill_tenant(self, user_id: str, tenant_code: str) -> int:
        """Set tenant_code on a legacy row that has none; return affected count."""
        result = await self.db.execute(
            update(UserIdentity)
            .where(
                UserIdentity.user_id == user_id,
                UserIdentity.tenant_code.is_(None),
            )
            .values(tenant_code=tenant_code)
        )
        return result.rowcount
