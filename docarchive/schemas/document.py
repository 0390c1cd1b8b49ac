"""Document API schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docarchive.application.dtos.document import DocumentAggregate
from docarchive.domain.field_types import FieldType
from docarchive.schemas.common import PaginationMeta


class DocumentCreateRequest(BaseModel):
    """Request body for creating a document. values is keyed by field id."""

    category_id: str
    folder_id: str
    document_date: date
    values: dict[str, Any] = Field(default_factory=dict)


class DocumentUpdateRequest(BaseModel):
    """Request body for PUT. Only the keys sent are changed; category is fixed."""

    folder_id: str | None = None
    document_date: date | None = None
    management_status: str | None = None
    backup_status: str | None = None
    values: dict[str, Any] | None = None


class StatusChangeRequest(BaseModel):
    status: str = Field(..., min_length=1)


class DocumentFieldResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field_id: str
    field_name: str
    field_type: FieldType
    required: bool
    display_order: int
    value: Any = None


class AttachmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    original_filename: str
    mime_type: str
    file_size: int
    checksum: str
    created_at: datetime


class DocumentResponse(BaseModel):
    """Full document: metadata, category, folder, ordered dynamic fields, attachments."""

    id: str
    category_id: str
    category_name: str
    category_status: str
    folder_id: str
    folder_label: str
    created_by: str | None
    document_date: date
    management_status: str
    backup_status: str
    created_at: datetime
    updated_at: datetime
    fields: list[DocumentFieldResponse]
    attachments: list[AttachmentResponse]

    @classmethod
    def from_aggregate(cls, aggregate: DocumentAggregate) -> DocumentResponse:
        doc = aggregate.document
        return cls(
            id=doc.id,
            category_id=doc.category_id,
            category_name=aggregate.category_name,
            category_status=aggregate.category_status,
            folder_id=doc.folder_id,
            folder_label=aggregate.folder_label,
            created_by=doc.created_by,
            document_date=doc.document_date,
            management_status=doc.management_status,
            backup_status=doc.backup_status,
            created_at=doc.created_at,
            updated_at=doc.updated_at,
            fields=[DocumentFieldResponse.model_validate(f) for f in aggregate.fields],
            attachments=[
                AttachmentResponse.model_validate(a) for a in aggregate.attachments
            ],
        )


class DocumentSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class DocumentListResponse(BaseModel):
    items: list[DocumentSummaryResponse]
    pagination: PaginationMeta


class DocumentStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_documents: int
    by_management_status: dict[str, int]
    by_backup_status: dict[str, int]
    total_folders: int
