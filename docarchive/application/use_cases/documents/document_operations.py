"""Document operations: compose metadata, dynamic values and attachments into one record."""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from datetime import date
from typing import TYPE_CHECKING, Any

from docarchive.application.dtos.document import (
    METADATA_COLUMNS,
    AttachmentResult,
    AttachmentUpload,
    DocumentAggregate,
    DocumentCreate,
    DocumentFieldView,
    DocumentFilters,
    DocumentResult,
    DocumentStatistics,
    DocumentSummary,
)
from docarchive.application.interfaces.repositories import (
    IAttachmentRepository,
    ICategoryRepository,
    IDocumentRepository,
    IFieldDefinitionRepository,
    IFolderRepository,
)
from docarchive.domain.enums import BackupStatus, CategoryStatus, ManagementStatus
from docarchive.domain.exceptions import ResourceNotFoundException, ValidationException
from docarchive.domain.field_types import FieldType
from docarchive.infrastructure.exceptions import StorageException
from docarchive.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from docarchive.application.interfaces.storage import IAttachmentStorage
    from docarchive.application.services.document_value_store import (
        DocumentValueStore,
    )
    from docarchive.shared.context import RequestContext

logger = get_logger(__name__)


def _clean_date(raw: date | str) -> date:
    return FieldType.DATE.coerce(raw, field="document_date")  # type: ignore[return-value]


def _clean_status(raw: str, allowed: list[str], field: str) -> str:
    value = str(raw).strip().lower() if raw is not None else ""
    if value not in allowed:
        raise ValidationException(
            f"Invalid {field}: {raw!r}. Valid values: {', '.join(allowed)}",
            field=field,
            reason="InvalidStatus",
        )
    return value


class DocumentAggregateService:
    """Document lifecycle and the composed read model.

    Writes only flush; the caller's unit of work commits metadata and values
    together. The optional attachment step runs after the rows are written
    and its storage failure never fails the document. File removals are
    registered on the unit of work: stored files are dropped if it rolls
    back, files of deleted documents only once it commits.
    """

    def __init__(
        self,
        category_repo: ICategoryRepository,
        folder_repo: IFolderRepository,
        document_repo: IDocumentRepository,
        field_repo: IFieldDefinitionRepository,
        value_store: "DocumentValueStore",
        attachment_repo: IAttachmentRepository,
        storage: "IAttachmentStorage | None" = None,
    ) -> None:
        self.category_repo = category_repo
        self.folder_repo = folder_repo
        self.document_repo = document_repo
        self.field_repo = field_repo
        self.value_store = value_store
        self.attachment_repo = attachment_repo
        self.storage = storage

    async def _require_document(self, document_id: str) -> DocumentResult:
        document = await self.document_repo.get_by_id(document_id)
        if not document:
            raise ResourceNotFoundException("document", document_id)
        return document

    async def _require_folder(self, folder_id: str) -> None:
        if not await self.folder_repo.get_by_id(folder_id):
            raise ResourceNotFoundException("folder", folder_id)

    async def get_document(self, document_id: str) -> DocumentAggregate | None:
        """Full document or None when it does not exist."""
        document = await self.document_repo.get_by_id(document_id)
        if not document:
            return None
        category = await self.category_repo.get_by_id(document.category_id)
        folder = await self.folder_repo.get_by_id(document.folder_id)
        fields = await self.field_repo.list_by_category(document.category_id)
        values = await self.value_store.get_values(document_id)
        attachments = await self.attachment_repo.list_for_document(document_id)
        views = tuple(
            DocumentFieldView(
                field_id=f.id,
                field_name=f.name,
                field_type=f.field_type,
                required=f.required,
                display_order=f.display_order,
                value=values[f.id].value if f.id in values else None,
            )
            for f in fields
        )
        return DocumentAggregate(
            document=document,
            category_name=category.name if category else "",
            category_status=category.status if category else "",
            folder_label=folder.label if folder else "",
            fields=views,
            values=values,
            attachments=tuple(attachments),
        )

    async def create_document(
        self,
        ctx: RequestContext,
        category_id: str,
        folder_id: str,
        document_date: date | str,
        initial_values: Mapping[str, Any] | None = None,
        attachment: AttachmentUpload | None = None,
    ) -> DocumentResult:
        """Create a document with its initial values and optional attachment.

        Raises:
            ResourceNotFoundException: Unknown category or folder.
            ValidationException: Obsolete category, bad date, bad or missing values.
        """
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise ResourceNotFoundException("category", category_id)
        if category.status != CategoryStatus.ACTIVE.value:
            raise ValidationException(
                f"Category '{category.name}' is obsolete and accepts no new documents",
                field="category_id",
                reason="ObsoleteCategory",
            )
        await self._require_folder(folder_id)
        document = await self.document_repo.create_document(
            DocumentCreate(
                category_id=category_id,
                folder_id=folder_id,
                created_by=ctx.user_id,
                document_date=_clean_date(document_date),
                management_status=ManagementStatus.PENDING.value,
                backup_status=BackupStatus.NOT_BACKED_UP.value,
            )
        )
        await self.value_store.set_values(
            document.id, category_id, initial_values or {}, enforce_required=True
        )
        if attachment is not None:
            await self._attach(document.id, attachment)
        return document

    async def update_document(
        self,
        ctx: RequestContext,
        document_id: str,
        metadata_patch: Mapping[str, Any] | None = None,
        values_patch: Mapping[str, Any] | None = None,
        attachment: AttachmentUpload | None = None,
    ) -> DocumentResult:
        """Patch allow-listed metadata and dynamic values together; category never changes."""
        document = await self._require_document(document_id)
        changes = await self._clean_metadata(metadata_patch or {})
        if values_patch:
            await self.value_store.set_values(
                document_id, document.category_id, values_patch, enforce_required=True
            )
        if changes:
            updated = await self.document_repo.update_document(document_id, changes)
            assert updated is not None
            document = updated
        if attachment is not None:
            await self._attach(document_id, attachment)
        logger.info(
            "Document updated: id=%s metadata=%s values=%d by=%s",
            document_id,
            sorted(changes),
            len(values_patch or {}),
            ctx.user_id,
        )
        return document

    async def _clean_metadata(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(patch) - METADATA_COLUMNS
        if unknown:
            raise ValidationException(
                f"Cannot update document fields: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
                reason="InvalidValue",
            )
        changes: dict[str, Any] = {}
        if "folder_id" in patch:
            await self._require_folder(patch["folder_id"])
            changes["folder_id"] = patch["folder_id"]
        if "document_date" in patch:
            changes["document_date"] = _clean_date(patch["document_date"])
        if "management_status" in patch:
            changes["management_status"] = _clean_status(
                patch["management_status"], ManagementStatus.values(), "management_status"
            )
        if "backup_status" in patch:
            changes["backup_status"] = _clean_status(
                patch["backup_status"], BackupStatus.values(), "backup_status"
            )
        return changes

    async def _attach(
        self, document_id: str, upload: AttachmentUpload
    ) -> AttachmentResult | None:
        """Store the file and record it; a storage failure is logged and swallowed."""
        if self.storage is None:
            logger.warning(
                "Attachment %s for document %s ignored: no storage configured",
                upload.filename,
                document_id,
            )
            return None
        try:
            return await self._store_and_record(document_id, upload)
        except StorageException:
            logger.warning(
                "Attachment %s for document %s not stored; document kept",
                upload.filename,
                document_id,
                exc_info=True,
            )
            return None

    async def add_attachment(
        self, ctx: RequestContext, document_id: str, upload: AttachmentUpload
    ) -> AttachmentResult:
        """Attach a file to an existing document. Storage errors propagate here.

        Raises:
            ResourceNotFoundException: Unknown document.
            StorageException: No storage configured, file rejected or write failed.
        """
        await self._require_document(document_id)
        if self.storage is None:
            raise StorageException(
                "Attachment storage is not configured", "STORAGE_NOT_CONFIGURED"
            )
        attachment = await self._store_and_record(document_id, upload)
        logger.info(
            "Attachment added: document_id=%s ref=%s by=%s",
            document_id,
            attachment.storage_ref,
            ctx.user_id,
        )
        return attachment

    async def _store_and_record(
        self, document_id: str, upload: AttachmentUpload
    ) -> AttachmentResult:
        assert self.storage is not None
        stored = await self.storage.store_file(
            document_id, upload.filename, upload.content, upload.mime_type
        )
        remove = partial(self._remove_file, document_id, stored.storage_ref)
        self.attachment_repo.after_rollback(remove)
        try:
            return await self.attachment_repo.create_attachment(
                document_id=document_id,
                storage_ref=stored.storage_ref,
                original_filename=upload.filename,
                mime_type=upload.mime_type,
                file_size=stored.size,
                checksum=stored.checksum,
            )
        except Exception:
            await remove()
            raise

    async def _remove_file(self, document_id: str, storage_ref: str) -> None:
        assert self.storage is not None
        try:
            await self.storage.delete(storage_ref)
        except StorageException:
            logger.warning(
                "Attachment file %s of document %s not removed",
                storage_ref,
                document_id,
                exc_info=True,
            )

    async def change_management_status(
        self, ctx: RequestContext, document_id: str, status: str
    ) -> DocumentResult:
        """Set any valid management status; no transition graph is enforced."""
        clean = _clean_status(status, ManagementStatus.values(), "management_status")
        await self._require_document(document_id)
        updated = await self.document_repo.update_document(
            document_id, {"management_status": clean}
        )
        assert updated is not None
        logger.info(
            "Document status changed: id=%s management_status=%s by=%s",
            document_id,
            clean,
            ctx.user_id,
        )
        return updated

    async def change_backup_status(
        self, ctx: RequestContext, document_id: str, status: str
    ) -> DocumentResult:
        clean = _clean_status(status, BackupStatus.values(), "backup_status")
        await self._require_document(document_id)
        updated = await self.document_repo.update_document(
            document_id, {"backup_status": clean}
        )
        assert updated is not None
        logger.info(
            "Document status changed: id=%s backup_status=%s by=%s",
            document_id,
            clean,
            ctx.user_id,
        )
        return updated

    async def cancel_document(self, ctx: RequestContext, document_id: str) -> DocumentResult:
        """Soft delete: management status becomes cancelled."""
        return await self.change_management_status(
            ctx, document_id, ManagementStatus.CANCELLED.value
        )

    async def delete_document(self, ctx: RequestContext, document_id: str) -> None:
        """Physically delete a document with its values, attachment rows and files."""
        await self._require_document(document_id)
        attachments = await self.attachment_repo.list_for_document(document_id)
        await self.value_store.delete_values(document_id)
        await self.document_repo.delete_document(document_id)
        if self.storage is None:
            return
        for attachment in attachments:
            self.attachment_repo.after_commit(
                partial(self._remove_file, document_id, attachment.storage_ref)
            )

    async def list_summaries(
        self,
        filters: DocumentFilters | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[DocumentSummary]:
        """Metadata-only listing, newest first."""
        return await self.document_repo.list_summaries(filters, skip=offset, limit=limit)

    async def count(self, filters: DocumentFilters | None = None) -> int:
        return await self.document_repo.count(filters)

    async def statistics(self) -> DocumentStatistics:
        """Dashboard counts; every status appears, zero when unused."""
        by_management = await self.document_repo.count_by("management_status")
        by_backup = await self.document_repo.count_by("backup_status")
        return DocumentStatistics(
            total_documents=await self.document_repo.count(),
            by_management_status={
                s: by_management.get(s, 0) for s in ManagementStatus.values()
            },
            by_backup_status={s: by_backup.get(s, 0) for s in BackupStatus.values()},
            total_folders=await self.folder_repo.count(),
        )
