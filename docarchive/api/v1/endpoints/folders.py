"""Folder API: thin routes delegating to FolderService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from docarchive.api.v1.dependencies import (
    get_folder_service,
    get_folder_service_for_write,
    get_request_context,
    require_permission,
)
from docarchive.application.services.folder_service import FolderService
from docarchive.core.limiter import limit_writes
from docarchive.domain.exceptions import ResourceNotFoundException
from docarchive.schemas.folder import (
    FolderCreateRequest,
    FolderListItem,
    FolderResponse,
    FolderUpdateRequest,
)
from docarchive.shared.context import RequestContext

router = APIRouter()


@router.post("", response_model=FolderResponse, status_code=201)
@limit_writes
async def create_folder(
    request: Request,
    body: FolderCreateRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("folder", "create"))],
    svc: Annotated[FolderService, Depends(get_folder_service_for_write)],
):
    """Create a folder. Label (and title, when given) must be unique."""
    created = await svc.create_folder(
        ctx,
        body.number,
        body.label,
        title=body.title,
        description=body.description,
    )
    return FolderResponse.model_validate(created)


@router.get("", response_model=list[FolderListItem])
async def list_folders(
    _: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[FolderService, Depends(get_folder_service)],
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    items = await svc.list_folders(limit=limit, offset=skip)
    return [FolderListItem.model_validate(f) for f in items]


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: str,
    _: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[FolderService, Depends(get_folder_service)],
):
    folder = await svc.get_folder(folder_id)
    if not folder:
        raise ResourceNotFoundException("folder", folder_id)
    return FolderResponse.model_validate(folder)


@router.put("/{folder_id}", response_model=FolderResponse)
@limit_writes
async def update_folder(
    request: Request,
    folder_id: str,
    body: FolderUpdateRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("folder", "update"))],
    svc: Annotated[FolderService, Depends(get_folder_service_for_write)],
):
    """Update the fields sent in the body."""
    updated = await svc.update_folder(ctx, folder_id, body.model_dump(exclude_unset=True))
    return FolderResponse.model_validate(updated)


@router.delete("/{folder_id}", status_code=204)
@limit_writes
async def delete_folder(
    request: Request,
    folder_id: str,
    ctx: Annotated[RequestContext, Depends(require_permission("folder", "delete"))],
    svc: Annotated[FolderService, Depends(get_folder_service_for_write)],
):
    """Delete an empty folder (409 while it holds documents)."""
    await svc.delete_folder(ctx, folder_id)
