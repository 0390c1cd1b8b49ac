"""Attachment repository."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.document import AttachmentResult
from docarchive.infrastructure.persistence import database
from docarchive.infrastructure.persistence.models.attachment import Attachment
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.shared.utils.datetime import ensure_utc


def _to_result(a: Attachment) -> AttachmentResult:
    return AttachmentResult(
        id=a.id,
        document_id=a.document_id,
        storage_ref=a.storage_ref,
        original_filename=a.original_filename,
        mime_type=a.mime_type,
        file_size=a.file_size,
        checksum=a.checksum,
        created_at=ensure_utc(a.created_at),
    )


class AttachmentRepository(BaseRepository[Attachment]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Attachment)

    async def create_attachment(
        self,
        document_id: str,
        storage_ref: str,
        original_filename: str,
        mime_type: str,
        file_size: int,
        checksum: str,
    ) -> AttachmentResult:
        entity = Attachment(
            document_id=document_id,
            storage_ref=storage_ref,
            original_filename=original_filename,
            mime_type=mime_type,
            file_size=file_size,
            checksum=checksum,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def list_for_document(self, document_id: str) -> list[AttachmentResult]:
        """Attachments of a document, oldest first."""
        result = await self.db.execute(
            select(Attachment)
            .where(Attachment.document_id == document_id)
            .order_by(Attachment.created_at.asc(), Attachment.id.asc())
        )
        return [_to_result(a) for a in result.scalars().all()]

    def after_commit(self, callback: Callable[[], Awaitable[object]]) -> None:
        database.after_commit(self.db, callback)

    def after_rollback(self, callback: Callable[[], Awaitable[object]]) -> None:
        database.after_rollback(self.db, callback)
