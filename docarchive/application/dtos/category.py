"""DTOs for categories and their field definitions (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from docarchive.domain.field_types import FieldType


@dataclass(frozen=True)
class FieldDefinitionResult:
    """Field definition read-model. field_type is the current tag on the definition."""

    id: str
    category_id: str
    name: str
    field_type: FieldType
    required: bool
    display_order: int
    max_length: int | None


@dataclass(frozen=True)
class FieldDefinitionCreate:
    """Input for one field when creating a category or adding a field."""

    name: str
    field_type: FieldType | str
    required: bool = False
    display_order: int = 1
    max_length: int | None = None


@dataclass(frozen=True)
class CategoryResult:
    """Category read-model; fields ordered by (display_order, id)."""

    id: str
    name: str
    description: str | None
    status: str
    created_by: str | None
    created_at: datetime
    fields: tuple[FieldDefinitionResult, ...] = field(default=())

    @property
    def is_active(self) -> bool:
        return self.status == "active"


@dataclass(frozen=True)
class CategoryListItem:
    """Category list item with field and document counts."""

    id: str
    name: str
    description: str | None
    status: str
    field_count: int
    document_count: int
