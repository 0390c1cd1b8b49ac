"""Repository implementations (SQLAlchemy, async)."""

from docarchive.infrastructure.persistence.repositories.attachment_repo import (
    AttachmentRepository,
)
from docarchive.infrastructure.persistence.repositories.base import BaseRepository
from docarchive.infrastructure.persistence.repositories.category_repo import (
    CategoryRepository,
)
from docarchive.infrastructure.persistence.repositories.document_repo import (
    DocumentRepository,
)
from docarchive.infrastructure.persistence.repositories.field_definition_repo import (
    FieldDefinitionRepository,
)
from docarchive.infrastructure.persistence.repositories.field_value_repo import (
    FieldValueRepository,
)
from docarchive.infrastructure.persistence.repositories.folder_repo import (
    FolderRepository,
)

__all__ = [
    "AttachmentRepository",
    "BaseRepository",
    "CategoryRepository",
    "DocumentRepository",
    "FieldDefinitionRepository",
    "FieldValueRepository",
    "FolderRepository",
]
