"""DTOs for document use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from docarchive.domain.field_types import FieldType, ValueSlot

# Columns a metadata patch may touch; category_id is fixed at creation.
METADATA_COLUMNS = frozenset(
    {"folder_id", "document_date", "management_status", "backup_status"}
)


@dataclass(frozen=True)
class DocumentCreate:
    """Input for creating a document record (write-model). Use case builds this; repo persists and returns DocumentResult."""

    category_id: str
    folder_id: str
    created_by: str | None
    document_date: date
    management_status: str
    backup_status: str


@dataclass(frozen=True)
class DocumentResult:
    """Document metadata read-model (no dynamic values)."""

    id: str
    category_id: str
    folder_id: str
    created_by: str | None
    document_date: date
    management_status: str
    backup_status: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DocumentSummary:
    """Metadata-only list item for listing/pagination."""

    id: str
    category_id: str
    category_name: str
    folder_id: str
    folder_label: str
    created_by: str | None
    document_date: date
    management_status: str
    backup_status: str
    created_at: datetime


@dataclass(frozen=True)
class DocumentFilters:
    """Listing filters; None means 'no filter'. Date range is inclusive on document_date."""

    category_id: str | None = None
    folder_id: str | None = None
    management_status: str | None = None
    backup_status: str | None = None
    created_by: str | None = None
    date_from: date | None = None
    date_to: date | None = None


@dataclass(frozen=True)
class FieldValue:
    """One reconstructed dynamic value.

    field_type is the field's *current* type; value is whatever slot was
    populated when it was written (the two can disagree after schema drift).
    """

    field_name: str
    field_type: FieldType
    value: Any


@dataclass(frozen=True)
class StoredFieldValue:
    """Raw EAV row as persisted (all four slots), for inspection."""

    document_id: str
    field_id: str
    value_text: str | None
    value_numeric: Any
    value_date: date | None
    value_boolean: bool | None

    def populated_slots(self) -> list[ValueSlot]:
        """Slots holding a non-null value."""
        return [
            slot
            for slot in ValueSlot
            if getattr(self, slot.column) is not None
        ]


@dataclass(frozen=True)
class AttachmentResult:
    """Attachment read-model."""

    id: str
    document_id: str
    storage_ref: str
    original_filename: str
    mime_type: str
    file_size: int
    checksum: str
    created_at: datetime


@dataclass(frozen=True)
class AttachmentUpload:
    """File handed to create/update for the optional attach step."""

    filename: str
    content: bytes
    mime_type: str


@dataclass(frozen=True)
class DocumentFieldView:
    """One labeled, ordered dynamic field of a document aggregate."""

    field_id: str
    field_name: str
    field_type: FieldType
    required: bool
    display_order: int
    value: Any


@dataclass(frozen=True)
class DocumentAggregate:
    """Fully composed document: metadata + category + folder + dynamic values + attachments."""

    document: DocumentResult
    category_name: str
    category_status: str
    folder_label: str
    fields: tuple[DocumentFieldView, ...]
    values: dict[str, FieldValue]
    attachments: tuple[AttachmentResult, ...] = field(default=())

    def value_of(self, field_name: str) -> Any:
        """Value of the first field with this name, or None."""
        for f in self.fields:
            if f.field_name == field_name:
                return f.value
        return None


@dataclass(frozen=True)
class DocumentStatistics:
    """Counts for the dashboard."""

    total_documents: int
    by_management_status: dict[str, int]
    by_backup_status: dict[str, int]
    total_folders: int
