"""Category and field definition API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docarchive.domain.field_types import FieldType


class FieldDefinitionRequest(BaseModel):
    """Request body for adding a field (also used inside category creation)."""

    name: str = Field(..., min_length=1, max_length=100)
    field_type: str = Field(..., description=f"One of: {', '.join(FieldType.values())}")
    required: bool = False
    display_order: int = Field(default=1, ge=0)
    max_length: int | None = Field(default=None, ge=1)


class FieldTypeChangeRequest(BaseModel):
    """Request body for PATCH /categories/fields/{field_id}."""

    field_type: str


class CategoryCreateRequest(BaseModel):
    """Request body for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    fields: list[FieldDefinitionRequest] = Field(default_factory=list)


class CategoryUpdateRequest(BaseModel):
    """Request body for PATCH (rename and/or description)."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)


class FieldDefinitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: str
    name: str
    field_type: FieldType
    required: bool
    display_order: int
    max_length: int | None


class CategoryResponse(BaseModel):
    """Category with its ordered fields."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    status: str
    created_by: str | None
    created_at: datetime
    fields: list[FieldDefinitionResponse]


class CategoryListItem(BaseModel):
    """Category list item with counts."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    status: str
    field_count: int
    document_count: int
