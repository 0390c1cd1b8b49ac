"""DTOs for physical folders (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FolderResult:
    """Folder read-model."""

    id: str
    number: int
    label: str
    title: str | None
    description: str | None
    created_by: str | None
    created_at: datetime


@dataclass(frozen=True)
class FolderListItem:
    """Folder list item with the number of documents filed in it."""

    id: str
    number: int
    label: str
    title: str | None
    description: str | None
    created_at: datetime
    document_count: int
