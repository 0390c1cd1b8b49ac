"""Document API: thin routes delegating to DocumentAggregateService.

Students only see and edit documents they created; listings are narrowed
to their own documents.
"""

from dataclasses import replace
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile

from docarchive.api.v1.dependencies import (
    Pagination,
    get_authorization_service,
    get_document_service,
    get_document_service_for_write,
    get_pagination,
    get_request_context,
    require_permission,
)
from docarchive.application.dtos.document import (
    AttachmentUpload,
    DocumentAggregate,
    DocumentFilters,
)
from docarchive.application.services.authorization_service import (
    AuthorizationService,
)
from docarchive.application.use_cases.documents import DocumentAggregateService
from docarchive.core.limiter import limit_upload, limit_writes
from docarchive.domain.exceptions import ResourceNotFoundException
from docarchive.schemas.common import PaginationMeta
from docarchive.schemas.document import (
    AttachmentResponse,
    DocumentCreateRequest,
    DocumentListResponse,
    DocumentResponse,
    DocumentStatisticsResponse,
    DocumentSummaryResponse,
    DocumentUpdateRequest,
    StatusChangeRequest,
)
from docarchive.shared.context import RequestContext

router = APIRouter()


async def _load_accessible(
    svc: DocumentAggregateService,
    auth_svc: AuthorizationService,
    ctx: RequestContext,
    document_id: str,
    action: str,
) -> DocumentAggregate:
    aggregate = await svc.get_document(document_id)
    if aggregate is None:
        raise ResourceNotFoundException("document", document_id)
    auth_svc.require_document_access(ctx, aggregate.document.created_by, action)
    return aggregate


@router.post("", response_model=DocumentResponse, status_code=201)
@limit_writes
async def create_document(
    request: Request,
    body: DocumentCreateRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("document", "create"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service_for_write)],
):
    """Create a document with its dynamic values (keyed by field id)."""
    created = await svc.create_document(
        ctx,
        body.category_id,
        body.folder_id,
        body.document_date,
        initial_values=body.values,
    )
    aggregate = await svc.get_document(created.id)
    assert aggregate is not None
    return DocumentResponse.from_aggregate(aggregate)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service)],
    pagination: Annotated[Pagination, Depends(get_pagination)],
    category_id: str | None = Query(None),
    folder_id: str | None = Query(None),
    management_status: str | None = Query(None),
    backup_status: str | None = Query(None),
    created_by: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
):
    """List document metadata, newest first, with page/limit pagination."""
    filters = DocumentFilters(
        category_id=category_id,
        folder_id=folder_id,
        management_status=management_status,
        backup_status=backup_status,
        created_by=created_by,
        date_from=date_from,
        date_to=date_to,
    )
    if ctx.is_student:
        filters = replace(filters, created_by=ctx.user_id)
    total = await svc.count(filters)
    items = await svc.list_summaries(
        filters, limit=pagination.limit, offset=pagination.offset
    )
    return DocumentListResponse(
        items=[DocumentSummaryResponse.model_validate(i) for i in items],
        pagination=PaginationMeta(
            page=pagination.page,
            limit=pagination.limit,
            total=total,
            pages=pagination.pages(total),
        ),
    )


@router.get("/statistics", response_model=DocumentStatisticsResponse)
async def document_statistics(
    _: Annotated[RequestContext, Depends(require_permission("report", "read"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service)],
):
    """Dashboard counts. Defined before /{document_id} for route precedence."""
    stats = await svc.statistics()
    return DocumentStatisticsResponse.model_validate(stats)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    aggregate = await _load_accessible(svc, auth_svc, ctx, document_id, "read")
    return DocumentResponse.from_aggregate(aggregate)


@router.put("/{document_id}", response_model=DocumentResponse)
@limit_writes
async def update_document(
    request: Request,
    document_id: str,
    body: DocumentUpdateRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("document", "update"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Update metadata and dynamic values together. The category cannot change."""
    await _load_accessible(svc, auth_svc, ctx, document_id, "update")
    metadata = body.model_dump(exclude_unset=True, exclude={"values"})
    for key, value in metadata.items():
        if value is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be null")
    await svc.update_document(
        ctx, document_id, metadata_patch=metadata, values_patch=body.values
    )
    aggregate = await svc.get_document(document_id)
    assert aggregate is not None
    return DocumentResponse.from_aggregate(aggregate)


@router.patch("/{document_id}/management-status", response_model=DocumentResponse)
@limit_writes
async def change_management_status(
    request: Request,
    document_id: str,
    body: StatusChangeRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("document", "update"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Set any of pending, in_review, archived, cancelled."""
    await _load_accessible(svc, auth_svc, ctx, document_id, "update")
    await svc.change_management_status(ctx, document_id, body.status)
    aggregate = await svc.get_document(document_id)
    assert aggregate is not None
    return DocumentResponse.from_aggregate(aggregate)


@router.patch("/{document_id}/backup-status", response_model=DocumentResponse)
@limit_writes
async def change_backup_status(
    request: Request,
    document_id: str,
    body: StatusChangeRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("document", "update"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    await _load_accessible(svc, auth_svc, ctx, document_id, "update")
    await svc.change_backup_status(ctx, document_id, body.status)
    aggregate = await svc.get_document(document_id)
    assert aggregate is not None
    return DocumentResponse.from_aggregate(aggregate)


@router.post(
    "/{document_id}/attachments", response_model=AttachmentResponse, status_code=201
)
@limit_upload
async def upload_attachment(
    request: Request,
    document_id: str,
    ctx: Annotated[RequestContext, Depends(require_permission("document", "update"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    file: UploadFile = File(...),
):
    """Attach a digital copy (extension allow-list and size limit from settings)."""
    await _load_accessible(svc, auth_svc, ctx, document_id, "update")
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename required")
    content = await file.read()
    attachment = await svc.add_attachment(
        ctx,
        document_id,
        AttachmentUpload(
            filename=file.filename,
            content=content,
            mime_type=file.content_type or "application/octet-stream",
        ),
    )
    return AttachmentResponse.model_validate(attachment)


@router.delete("/{document_id}", response_model=DocumentResponse)
@limit_writes
async def cancel_document(
    request: Request,
    document_id: str,
    ctx: Annotated[RequestContext, Depends(require_permission("document", "delete"))],
    svc: Annotated[DocumentAggregateService, Depends(get_document_service_for_write)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Cancel a document (management status becomes cancelled); the record is kept."""
    await _load_accessible(svc, auth_svc, ctx, document_id, "delete")
    await svc.cancel_document(ctx, document_id)
    aggregate = await svc.get_document(document_id)
    assert aggregate is not None
    return DocumentResponse.from_aggregate(aggregate)
