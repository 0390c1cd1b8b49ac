"""Folder repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.folder import FolderListItem, FolderResult
from docarchive.infrastructure.persistence.models.document import Document
from docarchive.infrastructure.persistence.models.folder import Folder
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.shared.telemetry.logging import get_logger
from docarchive.shared.utils.datetime import ensure_utc

_logger = get_logger(__name__)


def _to_result(f: Folder) -> FolderResult:
    """Map ORM Folder to FolderResult."""
    return FolderResult(
        id=f.id,
        number=f.number,
        label=f.label,
        title=f.title,
        description=f.description,
        created_by=f.created_by,
        created_at=ensure_utc(f.created_at),
    )


class FolderRepository(BaseRepository[Folder]):
    """Physical folders."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Folder)

    async def get_by_id(self, folder_id: str) -> FolderResult | None:
        row = await self._get_orm(folder_id)
        return _to_result(row) if row else None

    async def label_taken(self, label: str, exclude_id: str | None = None) -> bool:
        stmt = select(func.count(Folder.id)).where(Folder.label == label)
        if exclude_id is not None:
            stmt = stmt.where(Folder.id != exclude_id)
        result = await self.db.execute(stmt)
        return (result.scalar() or 0) > 0

    async def title_taken(self, title: str, exclude_id: str | None = None) -> bool:
        stmt = select(func.count(Folder.id)).where(Folder.title == title)
        if exclude_id is not None:
            stmt = stmt.where(Folder.id != exclude_id)
        result = await self.db.execute(stmt)
        return (result.scalar() or 0) > 0

    async def create_folder(
        self,
        number: int,
        label: str,
        *,
        title: str | None = None,
        description: str | None = None,
        created_by: str | None = None,
    ) -> FolderResult:
        entity = Folder(
            number=number,
            label=label,
            title=title,
            description=description,
            created_by=created_by,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_folder(
        self, folder_id: str, changes: dict[str, object]
    ) -> FolderResult | None:
        """Apply changes (keys: number, label, title, description). None if not found."""
        entity = await self._get_orm(folder_id)
        if not entity:
            return None
        for key, value in changes.items():
            setattr(entity, key, value)
        updated = await self.update(entity)
        return _to_result(updated)

    async def delete_folder(self, folder_id: str) -> bool:
        entity = await self._get_orm(folder_id)
        if not entity:
            return False
        await self.delete(entity)
        return True

    async def document_count(self, folder_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Document.id)).where(Document.folder_id == folder_id)
        )
        return result.scalar() or 0

    async def list_with_counts(
        self, *, skip: int = 0, limit: int = 100
    ) -> list[FolderListItem]:
        """Folders ordered by number then label, with document counts."""
        document_count = (
            select(func.count(Document.id))
            .where(Document.folder_id == Folder.id)
            .correlate(Folder)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Folder, document_count)
            .order_by(Folder.number.asc(), Folder.label.asc())
            .offset(skip)
            .limit(limit)
        )
        return [
            FolderListItem(
                id=f.id,
                number=f.number,
                label=f.label,
                title=f.title,
                description=f.description,
                created_at=ensure_utc(f.created_at),
                document_count=docs or 0,
            )
            for f, docs in result.all()
        ]

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Folder.id)))
        return result.scalar() or 0

    async def _on_after_create(self, obj: Folder) -> None:
        _logger.info("Folder created: id=%s label=%s", obj.id, obj.label)

    async def _on_before_delete(self, obj: Folder) -> None:
        _logger.info("Folder deleted: id=%s label=%s", obj.id, obj.label)
