"""Category API: thin routes delegating to CategorySchemaService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from docarchive.api.v1.dependencies import (
    get_category_service,
    get_category_service_for_write,
    get_request_context,
    require_permission,
)
from docarchive.application.dtos.category import FieldDefinitionCreate
from docarchive.application.services.category_schema_service import (
    CategorySchemaService,
)
from docarchive.core.limiter import limit_writes
from docarchive.domain.exceptions import ResourceNotFoundException
from docarchive.schemas.category import (
    CategoryCreateRequest,
    CategoryListItem,
    CategoryResponse,
    CategoryUpdateRequest,
    FieldDefinitionRequest,
    FieldDefinitionResponse,
    FieldTypeChangeRequest,
)
from docarchive.shared.context import RequestContext

router = APIRouter()


@router.post("", response_model=CategoryResponse, status_code=201)
@limit_writes
async def create_category(
    request: Request,
    body: CategoryCreateRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "create"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    """Create a category with optional initial fields. Name must be unused (retired names included)."""
    created = await svc.create_category(
        ctx,
        body.name,
        description=body.description,
        fields=[
            FieldDefinitionCreate(
                name=f.name,
                field_type=f.field_type,
                required=f.required,
                display_order=f.display_order,
                max_length=f.max_length,
            )
            for f in body.fields
        ],
    )
    return CategoryResponse.model_validate(created)


@router.get("", response_model=list[CategoryListItem])
async def list_categories(
    _: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[CategorySchemaService, Depends(get_category_service)],
    include_obsolete: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """List categories by name with field and document counts."""
    items = await svc.list_categories(
        active_only=not include_obsolete, limit=limit, offset=skip
    )
    return [CategoryListItem.model_validate(c) for c in items]


@router.patch("/fields/{field_id}", response_model=FieldDefinitionResponse)
@limit_writes
async def change_field_type(
    request: Request,
    field_id: str,
    body: FieldTypeChangeRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "update"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    """Change a field's type. Values already stored keep their original slot."""
    updated = await svc.change_field_type(ctx, field_id, body.field_type)
    return FieldDefinitionResponse.model_validate(updated)


@router.delete("/fields/{field_id}", status_code=204)
@limit_writes
async def remove_field(
    request: Request,
    field_id: str,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "update"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    """Remove a field definition; stored values for it are kept but no longer shown."""
    await svc.remove_field(ctx, field_id)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    _: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[CategorySchemaService, Depends(get_category_service)],
):
    category = await svc.get_category(category_id)
    if not category:
        raise ResourceNotFoundException("category", category_id)
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
@limit_writes
async def update_category(
    request: Request,
    category_id: str,
    body: CategoryUpdateRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "update"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    """Rename and/or change the description."""
    category = await svc.get_category(category_id)
    if not category:
        raise ResourceNotFoundException("category", category_id)
    if body.name is not None:
        category = await svc.rename_category(ctx, category_id, body.name)
    if body.description is not None:
        category = await svc.update_description(ctx, category_id, body.description)
    return CategoryResponse.model_validate(category)


@router.post("/{category_id}/retire", response_model=CategoryResponse)
@limit_writes
async def retire_category(
    request: Request,
    category_id: str,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "delete"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    """Mark obsolete. Existing documents stay; no new documents can use it."""
    retired = await svc.retire_category(ctx, category_id)
    return CategoryResponse.model_validate(retired)


@router.post("/{category_id}/reactivate", response_model=CategoryResponse)
@limit_writes
async def reactivate_category(
    request: Request,
    category_id: str,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "update"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    active = await svc.reactivate_category(ctx, category_id)
    return CategoryResponse.model_validate(active)


@router.get("/{category_id}/fields", response_model=list[FieldDefinitionResponse])
async def list_fields(
    category_id: str,
    _: Annotated[RequestContext, Depends(get_request_context)],
    svc: Annotated[CategorySchemaService, Depends(get_category_service)],
):
    """Fields in display order (ties broken by id)."""
    if not await svc.get_category(category_id):
        raise ResourceNotFoundException("category", category_id)
    fields = await svc.list_fields(category_id)
    return [FieldDefinitionResponse.model_validate(f) for f in fields]


@router.post(
    "/{category_id}/fields", response_model=FieldDefinitionResponse, status_code=201
)
@limit_writes
async def add_field(
    request: Request,
    category_id: str,
    body: FieldDefinitionRequest,
    ctx: Annotated[RequestContext, Depends(require_permission("category", "update"))],
    svc: Annotated[CategorySchemaService, Depends(get_category_service_for_write)],
):
    created = await svc.add_field(
        ctx,
        category_id,
        body.name,
        body.field_type,
        required=body.required,
        order=body.display_order,
        max_length=body.max_length,
    )
    return FieldDefinitionResponse.model_validate(created)
