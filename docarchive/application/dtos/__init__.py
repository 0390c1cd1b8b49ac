"""Application DTOs (no ORM dependency)."""

from docarchive.application.dtos.category import (
    CategoryListItem,
    CategoryResult,
    FieldDefinitionCreate,
    FieldDefinitionResult,
)
from docarchive.application.dtos.document import (
    AttachmentResult,
    AttachmentUpload,
    DocumentAggregate,
    DocumentCreate,
    DocumentFieldView,
    DocumentFilters,
    DocumentResult,
    DocumentStatistics,
    DocumentSummary,
    FieldValue,
    StoredFieldValue,
)
from docarchive.application.dtos.folder import FolderListItem, FolderResult

__all__ = [
    "AttachmentResult",
    "AttachmentUpload",
    "CategoryListItem",
    "CategoryResult",
    "DocumentAggregate",
    "DocumentCreate",
    "DocumentFieldView",
    "DocumentFilters",
    "DocumentResult",
    "DocumentStatistics",
    "DocumentSummary",
    "FieldDefinitionCreate",
    "FieldDefinitionResult",
    "FieldValue",
    "FolderListItem",
    "FolderResult",
    "StoredFieldValue",
]
