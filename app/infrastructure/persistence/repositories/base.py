"""Base repository: generic primary-key lookup, insert and lifecycle hooks."""

from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_pk, add and hooks.

    Subclasses override _on_after_add for logging or cache invalidation.
    LSP: subclasses are substitutable for BaseRepository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_pk(self, *pk: Any) -> ModelType | None:
        """Return a single record by (possibly composite) primary key, or None."""
        identity = pk[0] if len(pk) == 1 else tuple(pk)
        return await self.db.get(self.model, identity)

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_add hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_add(obj)
        return obj

    async def _on_after_add(self, obj: ModelType) -> None:
        """Override in subclasses to emit logs or events."""
