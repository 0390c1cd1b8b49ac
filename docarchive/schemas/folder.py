"""Folder API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FolderCreateRequest(BaseModel):
    number: int = Field(..., ge=1)
    label: str = Field(..., min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=150)
    description: str | None = Field(default=None, max_length=2000)


class FolderUpdateRequest(BaseModel):
    """Request body for PUT (only the fields sent are changed)."""

    number: int | None = Field(default=None, ge=1)
    label: str | None = Field(default=None, min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=150)
    description: str | None = Field(default=None, max_length=2000)


class FolderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    number: int
    label: str
    title: str | None
    description: str | None
    created_by: str | None
    created_at: datetime


class FolderListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    number: int
    label: str
    title: str | None
    description: str | None
    created_at: datetime
    document_count: int
