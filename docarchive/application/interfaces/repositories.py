"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from docarchive.application.dtos.category import (
        CategoryListItem,
        CategoryResult,
        FieldDefinitionResult,
    )
    from docarchive.application.dtos.document import (
        AttachmentResult,
        DocumentCreate,
        DocumentFilters,
        DocumentResult,
        DocumentSummary,
        StoredFieldValue,
    )
    from docarchive.application.dtos.folder import FolderListItem, FolderResult
    from docarchive.domain.field_types import FieldType, ValueSlot


class ICategoryRepository(Protocol):
    """Protocol for category repository (DIP)."""

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        """Return category by ID (without fields)."""

    async def name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        """True if any category other than exclude_id uses name."""

    async def create_category(
        self,
        name: str,
        description: str | None = None,
        created_by: str | None = None,
    ) -> CategoryResult:
        """Create an active category."""

    async def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> CategoryResult | None:
        """Apply non-None changes. None if not found."""

    async def list_with_counts(
        self, *, active_only: bool = True, skip: int = 0, limit: int = 100
    ) -> list[CategoryListItem]:
        """Categories ordered by name with field and document counts."""

    async def count(self, *, active_only: bool = True) -> int:
        """Number of categories."""


class IFieldDefinitionRepository(Protocol):
    """Protocol for field definition repository (DIP)."""

    async def get_by_id(self, field_id: str) -> FieldDefinitionResult | None:
        """Return field definition by ID."""

    async def list_by_category(self, category_id: str) -> list[FieldDefinitionResult]:
        """Fields of a category ordered by (display_order, id)."""

    async def get_by_ids(
        self, field_ids: Iterable[str]
    ) -> dict[str, FieldDefinitionResult]:
        """Batch lookup keyed by id; unknown ids are absent."""

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
        """Create a field definition."""

    async def update_field(
        self,
        field_id: str,
        *,
        field_type: FieldType | None = None,
        max_length: int | None = None,
        clear_max_length: bool = False,
    ) -> FieldDefinitionResult | None:
        """Change type and/or max length. None if not found."""

    async def delete_field(self, field_id: str) -> bool:
        """Delete the definition only; stored values stay."""


class IFieldValueRepository(Protocol):
    """Protocol for EAV value repository (DIP)."""

    async def list_for_document(self, document_id: str) -> list[StoredFieldValue]:
        """All value rows of a document, orphans included."""

    async def upsert_many(
        self, document_id: str, writes: Iterable[tuple[str, ValueSlot, Any]]
    ) -> int:
        """Insert or overwrite (field_id, slot, value) rows."""

    async def delete_fields(self, document_id: str, field_ids: Iterable[str]) -> int:
        """Delete rows of the given fields."""

    async def delete_for_document(self, document_id: str) -> int:
        """Delete every value row of a document."""


class IFolderRepository(Protocol):
    """Protocol for folder repository (DIP)."""

    async def get_by_id(self, folder_id: str) -> FolderResult | None:
        """Return folder by ID."""

    async def label_taken(self, label: str, exclude_id: str | None = None) -> bool:
        """True if another folder uses label."""

    async def title_taken(self, title: str, exclude_id: str | None = None) -> bool:
        """True if another folder uses title."""

    async def create_folder(
        self,
        number: int,
        label: str,
        *,
        title: str | None = None,
        description: str | None = None,
        created_by: str | None = None,
    ) -> FolderResult:
        """Create a folder."""

    async def update_folder(
        self, folder_id: str, changes: dict[str, object]
    ) -> FolderResult | None:
        """Apply changes. None if not found."""

    async def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder. False if not found."""

    async def document_count(self, folder_id: str) -> int:
        """Number of documents filed in the folder."""

    async def list_with_counts(
        self, *, skip: int = 0, limit: int = 100
    ) -> list[FolderListItem]:
        """Folders with document counts."""

    async def count(self) -> int:
        """Number of folders."""


class IDocumentRepository(Protocol):
    """Protocol for document metadata repository (DIP)."""

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        """Return document metadata by ID."""

    async def create_document(self, data: DocumentCreate) -> DocumentResult:
        """Create a document record."""

    async def update_document(
        self, document_id: str, changes: dict[str, Any]
    ) -> DocumentResult | None:
        """Apply allow-listed metadata changes. None if not found."""

    async def delete_document(self, document_id: str) -> bool:
        """Delete a document record. False if not found."""

    async def list_summaries(
        self,
        filters: DocumentFilters | None = None,
        *,
        skip: int = 0,
        limit: int = 10,
    ) -> list[DocumentSummary]:
        """Metadata listing, newest first."""

    async def count(self, filters: DocumentFilters | None = None) -> int:
        """Number of documents matching filters."""

    async def count_by(self, column: str) -> dict[str, int]:
        """Counts grouped by a status column."""


class IAttachmentRepository(Protocol):
    """Protocol for attachment repository (DIP)."""

    async def create_attachment(
        self,
        document_id: str,
        storage_ref: str,
        original_filename: str,
        mime_type: str,
        file_size: int,
        checksum: str,
    ) -> AttachmentResult:
        """Record a stored attachment."""

    async def list_for_document(self, document_id: str) -> list[AttachmentResult]:
        """Attachments of a document, oldest first."""

    def after_commit(self, callback: Callable[[], Awaitable[object]]) -> None:
        """Defer callback until the current unit of work commits."""

    def after_rollback(self, callback: Callable[[], Awaitable[object]]) -> None:
        """Run callback only if the current unit of work rolls back."""
