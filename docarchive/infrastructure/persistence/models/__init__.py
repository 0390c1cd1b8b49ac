"""Persistence models: ORM entities and mixins."""

from docarchive.infrastructure.persistence.models.attachment import Attachment
from docarchive.infrastructure.persistence.models.category import Category
from docarchive.infrastructure.persistence.models.document import Document
from docarchive.infrastructure.persistence.models.document_field_value import (
    DocumentFieldValue,
)
from docarchive.infrastructure.persistence.models.field_definition import (
    FieldDefinition,
)
from docarchive.infrastructure.persistence.models.folder import Folder
from docarchive.infrastructure.persistence.models.mixins import (
    ArchiveModel,
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)

__all__ = [
    "Attachment",
    "Category",
    "Document",
    "DocumentFieldValue",
    "FieldDefinition",
    "Folder",
    "ArchiveModel",
    "CreatedAtMixin",
    "CuidMixin",
    "TimestampMixin",
]
