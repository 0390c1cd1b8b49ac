"""Category repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.category import CategoryListItem, CategoryResult
from docarchive.domain.enums import CategoryStatus
from docarchive.infrastructure.persistence.models.category import Category
from docarchive.infrastructure.persistence.models.document import Document
from docarchive.infrastructure.persistence.models.field_definition import (
    FieldDefinition,
)
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.shared.telemetry.logging import get_logger
from docarchive.shared.utils.datetime import ensure_utc

_logger = get_logger(__name__)


def _to_result(c: Category) -> CategoryResult:
    """Map ORM Category to CategoryResult (fields are attached by the service)."""
    return CategoryResult(
        id=c.id,
        name=c.name,
        description=c.description,
        status=c.status,
        created_by=c.created_by,
        created_at=ensure_utc(c.created_at),
    )


class CategoryRepository(BaseRepository[Category]):
    """Category repository. Categories are never deleted; retiring flips status."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Category)

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        row = await self._get_orm(category_id)
        return _to_result(row) if row else None

    async def name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        """True if another category (any status) already uses name."""
        stmt = select(func.count(Category.id)).where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self.db.execute(stmt)
        return (result.scalar() or 0) > 0

    async def create_category(
        self,
        name: str,
        description: str | None = None,
        created_by: str | None = None,
    ) -> CategoryResult:
        entity = Category(
            name=name,
            description=description,
            status=CategoryStatus.ACTIVE.value,
            created_by=created_by,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> CategoryResult | None:
        """Apply non-None changes; return updated result or None if not found."""
        entity = await self._get_orm(category_id)
        if not entity:
            return None
        if name is not None:
            entity.name = name
        if description is not None:
            entity.description = description
        if status is not None:
            entity.status = status
        updated = await self.update(entity)
        return _to_result(updated)

    async def list_with_counts(
        self, *, active_only: bool = True, skip: int = 0, limit: int = 100
    ) -> list[CategoryListItem]:
        """Categories ordered by name with field and document counts."""
        field_count = (
            select(func.count(FieldDefinition.id))
            .where(FieldDefinition.category_id == Category.id)
            .correlate(Category)
            .scalar_subquery()
        )
        document_count = (
            select(func.count(Document.id))
            .where(Document.category_id == Category.id)
            .correlate(Category)
            .scalar_subquery()
        )
        stmt = select(Category, field_count, document_count)
        if active_only:
            stmt = stmt.where(Category.status == CategoryStatus.ACTIVE.value)
        stmt = stmt.order_by(Category.name.asc()).offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        return [
            CategoryListItem(
                id=c.id,
                name=c.name,
                description=c.description,
                status=c.status,
                field_count=fields or 0,
                document_count=docs or 0,
            )
            for c, fields, docs in result.all()
        ]

    async def count(self, *, active_only: bool = True) -> int:
        stmt = select(func.count(Category.id))
        if active_only:
            stmt = stmt.where(Category.status == CategoryStatus.ACTIVE.value)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _on_after_create(self, obj: Category) -> None:
        _logger.info("Category created: id=%s name=%s", obj.id, obj.name)

    async def _on_after_update(self, obj: Category) -> None:
        _logger.info(
            "Category updated: id=%s name=%s status=%s", obj.id, obj.name, obj.status
        )
