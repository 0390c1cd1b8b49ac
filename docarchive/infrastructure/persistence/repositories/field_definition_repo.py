"""Field definition repository. Returns application DTOs ordered by (display_order, id)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.category import FieldDefinitionResult
from docarchive.domain.field_types import FieldType
from docarchive.infrastructure.persistence.models.field_definition import (
    FieldDefinition,
)
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.shared.telemetry.logging import get_logger

_logger = get_logger(__name__)


def _to_result(f: FieldDefinition) -> FieldDefinitionResult:
    """Map ORM FieldDefinition to FieldDefinitionResult."""
    return FieldDefinitionResult(
        id=f.id,
        category_id=f.category_id,
        name=f.name,
        field_type=FieldType(f.field_type),
        required=f.required,
        display_order=f.display_order,
        max_length=f.max_length,
    )


class FieldDefinitionRepository(BaseRepository[FieldDefinition]):
    """Field definitions of categories."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, FieldDefinition)

    async def get_by_id(self, field_id: str) -> FieldDefinitionResult | None:
        row = await self._get_orm(field_id)
        return _to_result(row) if row else None

    async def list_by_category(self, category_id: str) -> list[FieldDefinitionResult]:
        """Fields of a category sorted by display_order then id (deterministic)."""
        result = await self.db.execute(
            select(FieldDefinition)
            .where(FieldDefinition.category_id == category_id)
            .order_by(FieldDefinition.display_order.asc(), FieldDefinition.id.asc())
        )
        return [_to_result(f) for f in result.scalars().all()]

    async def get_by_ids(self, field_ids: Iterable[str]) -> dict[str, FieldDefinitionResult]:
        """Batch lookup; missing ids are absent from the result."""
        ids = list(set(field_ids))
        if not ids:
            return {}
        result = await self.db.execute(
            select(FieldDefinition).where(FieldDefinition.id.in_(ids))
        )
        return {f.id: _to_result(f) for f in result.scalars().all()}

    async def create_field(
        self,
        category_id: str,
        name: str,
        field_type: FieldType,
        *,
        required: bool = False,
        display_order: int = 1,
        max_length: int | None = None,
    ) -> FieldDefinitionResult:
        entity = FieldDefinition(
            category_id=category_id,
            name=name,
            field_type=field_type.value,
            required=required,
            display_order=display_order,
            max_length=max_length,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_field(
        self,
        field_id: str,
        *,
        field_type: FieldType | None = None,
        max_length: int | None = None,
        clear_max_length: bool = False,
    ) -> FieldDefinitionResult | None:
        """Change type and/or max length; stored values are left untouched."""
        entity = await self._get_orm(field_id)
        if not entity:
            return None
        if field_type is not None:
            entity.field_type = field_type.value
        if clear_max_length:
            entity.max_length = None
        elif max_length is not None:
            entity.max_length = max_length
        updated = await self.update(entity)
        return _to_result(updated)

    async def delete_field(self, field_id: str) -> bool:
        """Delete the definition only. Returns False when not found."""
        entity = await self._get_orm(field_id)
        if not entity:
            return False
        await self.delete(entity)
        return True

    async def _on_after_create(self, obj: FieldDefinition) -> None:
        _logger.info(
            "Field added: id=%s category_id=%s name=%s type=%s",
            obj.id,
            obj.category_id,
            obj.name,
            obj.field_type,
        )

    async def _on_before_delete(self, obj: FieldDefinition) -> None:
        _logger.info(
            "Field removed: id=%s category_id=%s (stored values are kept)",
            obj.id,
            obj.category_id,
        )
