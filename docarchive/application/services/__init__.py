"""Application services."""

from docarchive.application.services.authorization_service import (
    ROLE_PERMISSIONS,
    AuthorizationService,
)
from docarchive.application.services.category_schema_service import (
    CategorySchemaService,
)
from docarchive.application.services.document_value_store import DocumentValueStore
from docarchive.application.services.folder_service import FolderService

__all__ = [
    "AuthorizationService",
    "CategorySchemaService",
    "DocumentValueStore",
    "FolderService",
    "ROLE_PERMISSIONS",
]
