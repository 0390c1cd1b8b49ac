"""Document repository. Metadata only; dynamic values live in FieldValueRepository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.document import (
    METADATA_COLUMNS,
    DocumentCreate,
    DocumentFilters,
    DocumentResult,
    DocumentSummary,
)
from docarchive.infrastructure.persistence.models.category import Category
from docarchive.infrastructure.persistence.models.document import Document
from docarchive.infrastructure.persistence.models.folder import Folder
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.shared.telemetry.logging import get_logger
from docarchive.shared.utils.datetime import ensure_utc, utc_now

_logger = get_logger(__name__)


def _to_result(d: Document) -> DocumentResult:
    """Map ORM Document to DocumentResult."""
    return DocumentResult(
        id=d.id,
        category_id=d.category_id,
        folder_id=d.folder_id,
        created_by=d.created_by,
        document_date=d.document_date,
        management_status=d.management_status,
        backup_status=d.backup_status,
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
    )


def _apply_filters(stmt: Select[Any], filters: DocumentFilters | None) -> Select[Any]:
    if filters is None:
        return stmt
    if filters.category_id:
        stmt = stmt.where(Document.category_id == filters.category_id)
    if filters.folder_id:
        stmt = stmt.where(Document.folder_id == filters.folder_id)
    if filters.management_status:
        stmt = stmt.where(Document.management_status == filters.management_status)
    if filters.backup_status:
        stmt = stmt.where(Document.backup_status == filters.backup_status)
    if filters.created_by:
        stmt = stmt.where(Document.created_by == filters.created_by)
    if filters.date_from:
        stmt = stmt.where(Document.document_date >= filters.date_from)
    if filters.date_to:
        stmt = stmt.where(Document.document_date <= filters.date_to)
    return stmt


class DocumentRepository(BaseRepository[Document]):
    """Document metadata repository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Document)

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        row = await self._get_orm(document_id)
        return _to_result(row) if row else None

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        """Persist a document; created_at is set here for sub-second listing order."""
        entity = Document(
            category_id=data.category_id,
            folder_id=data.folder_id,
            created_by=data.created_by,
            document_date=data.document_date,
            management_status=data.management_status,
            backup_status=data.backup_status,
            created_at=utc_now(),
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_document(
        self, document_id: str, changes: dict[str, Any]
    ) -> DocumentResult | None:
        """Apply metadata changes restricted to METADATA_COLUMNS. None if not found."""
        unknown = set(changes) - METADATA_COLUMNS
        if unknown:
            raise ValueError(f"Non-updatable document columns: {sorted(unknown)}")
        entity = await self._get_orm(document_id)
        if not entity:
            return None
        for key, value in changes.items():
            setattr(entity, key, value)
        updated = await self.update(entity)
        return _to_result(updated)

    async def delete_document(self, document_id: str) -> bool:
        entity = await self._get_orm(document_id)
        if not entity:
            return False
        await self.delete(entity)
        return True

    async def list_summaries(
        self,
        filters: DocumentFilters | None = None,
        *,
        skip: int = 0,
        limit: int = 10,
    ) -> list[DocumentSummary]:
        """Metadata listing, newest first (created_at desc, then id desc)."""
        stmt = (
            select(Document, Category.name, Folder.label)
            .join(Category, Category.id == Document.category_id)
            .join(Folder, Folder.id == Document.folder_id)
        )
        stmt = _apply_filters(stmt, filters)
        stmt = (
            stmt.order_by(Document.created_at.desc(), Document.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [
            DocumentSummary(
                id=d.id,
                category_id=d.category_id,
                category_name=category_name,
                folder_id=d.folder_id,
                folder_label=folder_label,
                created_by=d.created_by,
                document_date=d.document_date,
                management_status=d.management_status,
                backup_status=d.backup_status,
                created_at=ensure_utc(d.created_at),
            )
            for d, category_name, folder_label in result.all()
        ]

    async def count(self, filters: DocumentFilters | None = None) -> int:
        stmt = _apply_filters(select(func.count(Document.id)), filters)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def count_by(self, column: str) -> dict[str, int]:
        """Document counts grouped by management_status or backup_status."""
        if column not in ("management_status", "backup_status"):
            raise ValueError(f"Cannot group documents by {column!r}")
        col = getattr(Document, column)
        result = await self.db.execute(select(col, func.count(Document.id)).group_by(col))
        return {value: total for value, total in result.all()}

    async def _on_after_create(self, obj: Document) -> None:
        _logger.info(
            "Document created: id=%s category_id=%s folder_id=%s",
            obj.id,
            obj.category_id,
            obj.folder_id,
        )

    async def _on_before_delete(self, obj: Document) -> None:
        _logger.info("Document deleted: id=%s", obj.id)
