"""Base repository: ORM loading, flush-only writes and lifecycle hooks."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Shared write path for the archive repositories.

    Subclasses expose DTOs and keep ORM instances private: they load with
    _get_orm, mutate the attached instance and hand it to update(). Writes
    only flush; the caller's unit of work (get_db_transactional) commits or
    rolls back. Override _on_after_create, _on_after_update or
    _on_before_delete for logging.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_orm(self, entity_id: str) -> ModelType | None:
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Add, flush and refresh a new record, then run _on_after_create."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes made to an instance loaded in this session."""
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()

    async def _on_after_create(self, obj: ModelType) -> None:
        """Hook: runs after a record is flushed."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Hook: runs after changes are flushed."""

    async def _on_before_delete(self, obj: ModelType) -> None:
        """Hook: runs before a record is deleted."""
