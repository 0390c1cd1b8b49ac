"""EAV value repository: one row per (document, field) with exactly one slot set."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.document import StoredFieldValue
from docarchive.domain.field_types import ValueSlot
from docarchive.infrastructure.persistence.models.document_field_value import (
    DocumentFieldValue,
)
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.shared.telemetry.logging import get_logger

_logger = get_logger(__name__)


def _to_result(v: DocumentFieldValue) -> StoredFieldValue:
    return StoredFieldValue(
        document_id=v.document_id,
        field_id=v.field_id,
        value_text=v.value_text,
        value_numeric=v.value_numeric,
        value_date=v.value_date,
        value_boolean=v.value_boolean,
    )


def _assign_slot(row: DocumentFieldValue, slot: ValueSlot, value: Any) -> None:
    """Null every slot then set the target one, so a single UPDATE keeps one slot populated."""
    for s in ValueSlot:
        setattr(row, s.column, None)
    setattr(row, slot.column, value)


class FieldValueRepository(BaseRepository[DocumentFieldValue]):
    """Typed value rows of documents. Orphaned rows (field removed) are returned as-is."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentFieldValue)

    async def _rows(self, document_id: str) -> list[DocumentFieldValue]:
        result = await self.db.execute(
            select(DocumentFieldValue).where(
                DocumentFieldValue.document_id == document_id
            )
        )
        return list(result.scalars().all())

    async def list_for_document(self, document_id: str) -> list[StoredFieldValue]:
        """All rows of a document including orphans; caller decides what to skip."""
        return [_to_result(v) for v in await self._rows(document_id)]

    async def upsert_many(
        self, document_id: str, writes: Iterable[tuple[str, ValueSlot, Any]]
    ) -> int:
        """Insert or overwrite (field_id, slot, value) rows; returns rows written.

        Values must already be coerced; this layer does no type checks.
        """
        existing = {row.field_id: row for row in await self._rows(document_id)}
        written = 0
        for field_id, slot, value in writes:
            row = existing.get(field_id)
            if row is None:
                row = DocumentFieldValue(document_id=document_id, field_id=field_id)
                _assign_slot(row, slot, value)
                self.db.add(row)
                existing[field_id] = row
            else:
                _assign_slot(row, slot, value)
            written += 1
        if written:
            await self.db.flush()
        return written

    async def delete_fields(self, document_id: str, field_ids: Iterable[str]) -> int:
        """Delete rows for the given fields of one document; returns rows deleted."""
        ids = list(set(field_ids))
        if not ids:
            return 0
        result = await self.db.execute(
            delete(DocumentFieldValue).where(
                DocumentFieldValue.document_id == document_id,
                DocumentFieldValue.field_id.in_(ids),
            )
        )
        await self.db.flush()
        return result.rowcount or 0

    async def delete_for_document(self, document_id: str) -> int:
        """Delete every value row of a document; returns rows deleted."""
        result = await self.db.execute(
            delete(DocumentFieldValue).where(
                DocumentFieldValue.document_id == document_id
            )
        )
        await self.db.flush()
        deleted = result.rowcount or 0
        _logger.debug("Deleted %d value rows of document %s", deleted, document_id)
        return deleted
