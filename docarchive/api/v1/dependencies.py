"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the caller's RequestContext and
application services. Read routes build services on get_db; write routes
on get_db_transactional so a whole request commits or rolls back together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.services.authorization_service import (
    AuthorizationService,
)
from docarchive.application.services.category_schema_service import (
    CategorySchemaService,
)
from docarchive.application.services.document_value_store import DocumentValueStore
from docarchive.application.services.folder_service import FolderService
from docarchive.application.use_cases.documents import DocumentAggregateService
from docarchive.core.config import get_settings
from docarchive.domain.enums import Role
from docarchive.domain.exceptions import AuthorizationException
from docarchive.infrastructure.external.storage.factory import StorageFactory
from docarchive.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
)
from docarchive.infrastructure.persistence.repositories import (
    AttachmentRepository,
    CategoryRepository,
    DocumentRepository,
    FieldDefinitionRepository,
    FieldValueRepository,
    FolderRepository,
)
from docarchive.shared.context import RequestContext


def get_authorization_service() -> AuthorizationService:
    return AuthorizationService()


def get_request_context(request: Request) -> RequestContext:
    """Build the caller context from the identity headers set by the auth gateway.

    Raises 401 when the user id header is missing; an unknown role is a 403.
    """
    settings = get_settings()
    user_id = (request.headers.get(settings.user_id_header) or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    raw_role = (request.headers.get(settings.user_role_header) or "").strip().lower()
    try:
        role = Role(raw_role)
    except ValueError as e:
        raise AuthorizationException(message=f"Unknown role: {raw_role or '<none>'}") from e
    return RequestContext(user_id=user_id, role=role)


def require_permission(resource: str, action: str):
    """Dependency factory: require an identified caller whose role grants resource:action."""

    def _require(
        ctx: Annotated[RequestContext, Depends(get_request_context)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> RequestContext:
        auth_svc.require_permission(ctx, resource, action)
        return ctx

    return _require


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def pages(self, total: int) -> int:
        return (total + self.limit - 1) // self.limit if total else 0


def get_pagination(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> Pagination:
    """Page/limit query parameters; limit defaults to and is capped by settings."""
    settings = get_settings()
    size = min(limit or settings.default_page_size, settings.max_page_size)
    return Pagination(page=page, limit=size)


def _category_service(db: AsyncSession) -> CategorySchemaService:
    return CategorySchemaService(CategoryRepository(db), FieldDefinitionRepository(db))


def _document_service(db: AsyncSession) -> DocumentAggregateService:
    field_repo = FieldDefinitionRepository(db)
    return DocumentAggregateService(
        category_repo=CategoryRepository(db),
        folder_repo=FolderRepository(db),
        document_repo=DocumentRepository(db),
        field_repo=field_repo,
        value_store=DocumentValueStore(field_repo, FieldValueRepository(db)),
        attachment_repo=AttachmentRepository(db),
        storage=StorageFactory.create_storage_service(),
    )


async def get_category_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategorySchemaService:
    """CategorySchemaService for read routes."""
    return _category_service(db)


async def get_category_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> CategorySchemaService:
    """CategorySchemaService for write routes (one transaction per request)."""
    return _category_service(db)


async def get_folder_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FolderService:
    return FolderService(FolderRepository(db))


async def get_folder_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> FolderService:
    return FolderService(FolderRepository(db))


async def get_document_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DocumentAggregateService:
    """DocumentAggregateService for read routes."""
    return _document_service(db)


async def get_document_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> DocumentAggregateService:
    """DocumentAggregateService for write routes; metadata, values and attachment rows commit together."""
    return _document_service(db)
