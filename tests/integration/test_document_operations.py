"""DocumentAggregateService against SQLite: lifecycle, composed reads, listing, attachments."""

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.category import CategoryResult, FieldDefinitionCreate
from docarchive.application.dtos.document import AttachmentUpload, DocumentFilters
from docarchive.application.dtos.folder import FolderResult
from docarchive.application.interfaces.storage import StoredFile
from docarchive.application.services.category_schema_service import CategorySchemaService
from docarchive.application.services.folder_service import FolderService
from docarchive.application.use_cases.documents import DocumentAggregateService
from docarchive.domain.exceptions import ResourceNotFoundException, ValidationException
from docarchive.domain.field_types import FieldType
from docarchive.infrastructure.exceptions import AttachmentRejectedError, StorageUploadError
from docarchive.infrastructure.external.storage import LocalAttachmentStorage
from docarchive.infrastructure.persistence import database
from docarchive.shared.context import RequestContext


class FailingStorage:
    """Storage whose writes always fail."""

    def __init__(self) -> None:
        self.deleted: list[str] = []

    async def store_file(
        self, document_id: str, filename: str, content: bytes, mime_type: str
    ) -> StoredFile:
        raise StorageUploadError(f"{document_id}/{filename}", "disk full")

    async def delete(self, storage_ref: str) -> bool:
        self.deleted.append(storage_ref)
        return True


PDF = AttachmentUpload(filename="scan.pdf", content=b"%PDF-1.4 test", mime_type="application/pdf")


@pytest.fixture
async def audit(category_service: CategorySchemaService, ctx: RequestContext) -> CategoryResult:
    return await category_service.create_category(
        ctx,
        "Audit",
        fields=[
            FieldDefinitionCreate(name="score", field_type="integer", required=True),
            FieldDefinitionCreate(name="note", field_type="long_text", display_order=2),
        ],
    )


@pytest.fixture
async def folder(folder_service: FolderService, ctx: RequestContext) -> FolderResult:
    return await folder_service.create_folder(ctx, 1, "F1", title="Audits 2024")


def _field_id(category: CategoryResult, name: str) -> str:
    return next(f.id for f in category.fields if f.name == name)


async def test_create_and_read_audit_document(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    score_id = _field_id(audit, "score")
    note_id = _field_id(audit, "note")

    created = await document_service.create_document(
        ctx,
        audit.id,
        folder.id,
        "2024-05-10",
        initial_values={score_id: "42", note_id: "All controls passed"},
    )
    aggregate = await document_service.get_document(created.id)

    assert aggregate is not None
    assert aggregate.document.management_status == "pending"
    assert aggregate.document.backup_status == "not_backed_up"
    assert aggregate.document.created_by == "admin-1"
    assert aggregate.document.document_date == date(2024, 5, 10)
    assert aggregate.category_name == "Audit"
    assert aggregate.folder_label == "F1"
    assert [f.field_name for f in aggregate.fields] == ["score", "note"]
    assert aggregate.value_of("score") == 42
    assert aggregate.value_of("note") == "All controls passed"
    assert aggregate.attachments == ()


async def test_required_field_missing_rejected(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await document_service.create_document(
            ctx, audit.id, folder.id, date(2024, 5, 10), {_field_id(audit, "note"): "x"}
        )
    assert exc_info.value.reason == "RequiredField"


async def test_type_change_keeps_stored_value(
    document_service: DocumentAggregateService,
    category_service: CategorySchemaService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    score_id = _field_id(audit, "score")
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {score_id: 7}
    )

    await category_service.change_field_type(ctx, score_id, FieldType.DECIMAL)
    aggregate = await document_service.get_document(created.id)

    assert aggregate is not None
    field_value = aggregate.values[score_id]
    assert field_value.field_type is FieldType.DECIMAL
    assert field_value.value == Decimal("7")
    assert isinstance(field_value.value, Decimal)


async def test_obsolete_category_accepts_no_new_documents(
    document_service: DocumentAggregateService,
    category_service: CategorySchemaService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    score_id = _field_id(audit, "score")
    existing = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {score_id: 1}
    )
    await category_service.retire_category(ctx, audit.id)

    with pytest.raises(ValidationException) as exc_info:
        await document_service.create_document(
            ctx, audit.id, folder.id, date(2024, 5, 11), {score_id: 2}
        )
    assert exc_info.value.reason == "ObsoleteCategory"

    aggregate = await document_service.get_document(existing.id)
    assert aggregate is not None
    assert aggregate.category_status == "obsolete"
    await document_service.update_document(ctx, existing.id, values_patch={score_id: 3})


async def test_unknown_category_or_folder(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    with pytest.raises(ResourceNotFoundException):
        await document_service.create_document(ctx, "missing", folder.id, date(2024, 1, 1))
    with pytest.raises(ResourceNotFoundException):
        await document_service.create_document(ctx, audit.id, "missing", date(2024, 1, 1))


async def test_update_metadata_and_values_together(
    document_service: DocumentAggregateService,
    folder_service: FolderService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    score_id = _field_id(audit, "score")
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {score_id: 1}
    )
    other = await folder_service.create_folder(ctx, 2, "F2")

    updated = await document_service.update_document(
        ctx,
        created.id,
        metadata_patch={"folder_id": other.id, "management_status": "in_review"},
        values_patch={score_id: "99"},
    )
    aggregate = await document_service.get_document(created.id)

    assert updated.folder_id == other.id
    assert updated.management_status == "in_review"
    assert aggregate is not None
    assert aggregate.value_of("score") == 99
    assert aggregate.document.category_id == audit.id


async def test_update_rejects_category_change_and_bad_status(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {_field_id(audit, "score"): 1}
    )
    with pytest.raises(ValidationException):
        await document_service.update_document(
            ctx, created.id, metadata_patch={"category_id": "other"}
        )
    with pytest.raises(ValidationException) as exc_info:
        await document_service.change_management_status(ctx, created.id, "lost")
    assert exc_info.value.reason == "InvalidStatus"


async def test_status_changes_and_cancel(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {_field_id(audit, "score"): 1}
    )
    archived = await document_service.change_management_status(ctx, created.id, "ARCHIVED")
    pending = await document_service.change_management_status(ctx, created.id, "pending")
    backed_up = await document_service.change_backup_status(ctx, created.id, "backed_up")
    cancelled = await document_service.cancel_document(ctx, created.id)

    assert archived.management_status == "archived"
    assert pending.management_status == "pending"
    assert backed_up.backup_status == "backed_up"
    assert cancelled.management_status == "cancelled"
    assert await document_service.get_document(created.id) is not None


async def test_listing_filters_and_pagination(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
    student_ctx: RequestContext,
) -> None:
    score_id = _field_id(audit, "score")
    first = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 1, 15), {score_id: 1}
    )
    second = await document_service.create_document(
        student_ctx, audit.id, folder.id, date(2024, 3, 15), {score_id: 2}
    )
    third = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 6, 15), {score_id: 3}
    )
    await document_service.change_management_status(ctx, third.id, "archived")

    newest_first = await document_service.list_summaries()
    page_two = await document_service.list_summaries(limit=2, offset=2)
    by_student = await document_service.list_summaries(DocumentFilters(created_by="student-1"))
    archived = DocumentFilters(management_status="archived")
    in_range = DocumentFilters(date_from=date(2024, 1, 15), date_to=date(2024, 3, 15))

    assert [d.id for d in newest_first] == [third.id, second.id, first.id]
    assert newest_first[0].category_name == "Audit"
    assert newest_first[0].folder_label == "F1"
    assert [d.id for d in page_two] == [first.id]
    assert [d.id for d in by_student] == [second.id]
    assert await document_service.count(archived) == 1
    assert {d.id for d in await document_service.list_summaries(in_range)} == {
        first.id,
        second.id,
    }
    assert await document_service.count() == 3


async def test_statistics(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {_field_id(audit, "score"): 1}
    )
    await document_service.change_backup_status(ctx, created.id, "backed_up")

    stats = await document_service.statistics()

    assert stats.total_documents == 1
    assert stats.total_folders == 1
    assert stats.by_management_status == {
        "pending": 1,
        "in_review": 0,
        "archived": 0,
        "cancelled": 0,
    }
    assert stats.by_backup_status == {"not_backed_up": 0, "backed_up": 1}


async def test_attachment_stored_with_document(
    document_service: DocumentAggregateService,
    attachment_storage: LocalAttachmentStorage,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    created = await document_service.create_document(
        ctx,
        audit.id,
        folder.id,
        date(2024, 5, 10),
        {_field_id(audit, "score"): 1},
        attachment=PDF,
    )
    aggregate = await document_service.get_document(created.id)

    assert aggregate is not None
    assert len(aggregate.attachments) == 1
    attachment = aggregate.attachments[0]
    assert attachment.original_filename == "scan.pdf"
    assert attachment.file_size == len(PDF.content)
    assert (attachment_storage.storage_root / attachment.storage_ref).is_file()


async def test_attachment_failure_keeps_document(
    make_document_service: Callable[..., DocumentAggregateService],
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    service = make_document_service(FailingStorage())

    created = await service.create_document(
        ctx,
        audit.id,
        folder.id,
        date(2024, 5, 10),
        {_field_id(audit, "score"): 1},
        attachment=PDF,
    )
    aggregate = await service.get_document(created.id)

    assert aggregate is not None
    assert aggregate.value_of("score") == 1
    assert aggregate.attachments == ()


async def test_rejected_attachment_on_create_is_ignored(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    created = await document_service.create_document(
        ctx,
        audit.id,
        folder.id,
        date(2024, 5, 10),
        {_field_id(audit, "score"): 1},
        attachment=AttachmentUpload("virus.exe", b"MZ", "application/octet-stream"),
    )
    aggregate = await document_service.get_document(created.id)
    assert aggregate is not None
    assert aggregate.attachments == ()


async def test_add_attachment_propagates_rejection(
    document_service: DocumentAggregateService,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
) -> None:
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {_field_id(audit, "score"): 1}
    )
    with pytest.raises(AttachmentRejectedError):
        await document_service.add_attachment(
            ctx, created.id, AttachmentUpload("virus.exe", b"MZ", "application/octet-stream")
        )
    attachment = await document_service.add_attachment(ctx, created.id, PDF)
    assert attachment.document_id == created.id
    assert len(attachment.checksum) == 64


async def test_delete_document_removes_values_and_files(
    document_service: DocumentAggregateService,
    attachment_storage: LocalAttachmentStorage,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
    db_session: AsyncSession,
) -> None:
    created = await document_service.create_document(
        ctx,
        audit.id,
        folder.id,
        date(2024, 5, 10),
        {_field_id(audit, "score"): 1},
        attachment=PDF,
    )
    aggregate = await document_service.get_document(created.id)
    assert aggregate is not None
    stored: Path = attachment_storage.storage_root / aggregate.attachments[0].storage_ref

    await document_service.delete_document(ctx, created.id)

    assert await document_service.get_document(created.id) is None
    assert await document_service.value_store.get_raw_rows(created.id) == []
    assert stored.exists()
    await database.commit(db_session)
    assert not stored.exists()
    with pytest.raises(ResourceNotFoundException):
        await document_service.delete_document(ctx, created.id)


async def test_rolled_back_delete_keeps_rows_and_files(
    document_service: DocumentAggregateService,
    attachment_storage: LocalAttachmentStorage,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
    db_session: AsyncSession,
) -> None:
    created = await document_service.create_document(
        ctx,
        audit.id,
        folder.id,
        date(2024, 5, 10),
        {_field_id(audit, "score"): 1},
        attachment=PDF,
    )
    await database.commit(db_session)
    aggregate = await document_service.get_document(created.id)
    assert aggregate is not None
    stored: Path = attachment_storage.storage_root / aggregate.attachments[0].storage_ref

    await document_service.delete_document(ctx, created.id)
    await database.rollback(db_session)

    restored = await document_service.get_document(created.id)
    assert restored is not None
    assert [a.storage_ref for a in restored.attachments] == [aggregate.attachments[0].storage_ref]
    assert stored.exists()


async def test_rolled_back_create_removes_stored_file(
    document_service: DocumentAggregateService,
    attachment_storage: LocalAttachmentStorage,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
    db_session: AsyncSession,
) -> None:
    created = await document_service.create_document(
        ctx,
        audit.id,
        folder.id,
        date(2024, 5, 10),
        {_field_id(audit, "score"): 1},
        attachment=PDF,
    )
    aggregate = await document_service.get_document(created.id)
    assert aggregate is not None
    stored: Path = attachment_storage.storage_root / aggregate.attachments[0].storage_ref
    assert stored.exists()

    await database.rollback(db_session)

    assert not stored.exists()


async def test_failed_attachment_record_removes_stored_file(
    document_service: DocumentAggregateService,
    attachment_storage: LocalAttachmentStorage,
    audit: CategoryResult,
    folder: FolderResult,
    ctx: RequestContext,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    created = await document_service.create_document(
        ctx, audit.id, folder.id, date(2024, 5, 10), {_field_id(audit, "score"): 1}
    )

    async def broken_insert(**kwargs: object) -> None:
        raise OperationalError("INSERT INTO attachment", {}, Exception("disk I/O error"))

    monkeypatch.setattr(document_service.attachment_repo, "create_attachment", broken_insert)

    with pytest.raises(OperationalError):
        await document_service.add_attachment(ctx, created.id, PDF)
    assert not (attachment_storage.storage_root / created.id).exists()
