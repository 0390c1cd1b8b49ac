"""Category schema service: category lifecycle and ordered field definitions.

The authority for "what shape does a document of category X have". Names
of retired categories stay reserved; retiring never touches documents.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from docarchive.application.dtos.category import (
    CategoryListItem,
    CategoryResult,
    FieldDefinitionCreate,
    FieldDefinitionResult,
)
from docarchive.application.interfaces.repositories import (
    ICategoryRepository,
    IFieldDefinitionRepository,
)
from docarchive.domain.enums import CategoryStatus
from docarchive.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from docarchive.domain.field_types import FieldType
from docarchive.shared.context import RequestContext
from docarchive.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _clean_name(raw: str | None, field: str) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationException(f"{field} must not be empty", field=field, reason="EmptyName")
    return name


def _clean_max_length(field_type: FieldType, max_length: int | None) -> int | None:
    """Positive limit for text types; non-text types never store one."""
    if max_length is None or not field_type.is_text:
        return None
    if max_length <= 0:
        raise ValidationException(
            "max_length must be a positive integer",
            field="max_length",
            reason="InvalidValue",
        )
    return max_length


class CategorySchemaService:
    """Category and field definition operations over their repositories."""

    def __init__(
        self,
        category_repo: ICategoryRepository,
        field_repo: IFieldDefinitionRepository,
    ) -> None:
        self.category_repo = category_repo
        self.field_repo = field_repo

    async def _require_category(self, category_id: str) -> CategoryResult:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise ResourceNotFoundException("category", category_id)
        return category

    async def _require_field(self, field_id: str) -> FieldDefinitionResult:
        field = await self.field_repo.get_by_id(field_id)
        if not field:
            raise ResourceNotFoundException("field", field_id)
        return field

    async def _with_fields(self, category: CategoryResult) -> CategoryResult:
        fields = await self.field_repo.list_by_category(category.id)
        return replace(category, fields=tuple(fields))

    async def create_category(
        self,
        ctx: RequestContext,
        name: str,
        description: str | None = None,
        fields: Iterable[FieldDefinitionCreate] | None = None,
    ) -> CategoryResult:
        """Create an active category, optionally with its initial fields.

        Raises:
            ValidationException: Empty name, or an invalid field definition.
            ConflictException: Name already used by any category (active or retired).
        """
        clean = _clean_name(name, "name")
        if await self.category_repo.name_taken(clean):
            raise ConflictException(
                f"Category name already exists: {clean}", resource_type="category", value=clean
            )
        category = await self.category_repo.create_category(
            clean, description=description, created_by=ctx.user_id
        )
        for definition in fields or ():
            await self.add_field(
                ctx,
                category.id,
                definition.name,
                definition.field_type,
                required=definition.required,
                order=definition.display_order,
                max_length=definition.max_length,
            )
        return await self._with_fields(category)

    async def add_field(
        self,
        ctx: RequestContext,
        category_id: str,
        name: str,
        field_type: FieldType | str,
        required: bool = False,
        order: int = 1,
        max_length: int | None = None,
    ) -> FieldDefinitionResult:
        """Append a field definition to a category.

        Raises:
            ResourceNotFoundException: Unknown category.
            ValidationException: Empty name, unknown type or non-positive max_length.
            ConflictException: Category already has a field with this name.
        """
        await self._require_category(category_id)
        clean = _clean_name(name, "field name")
        parsed = FieldType.parse(field_type)
        limit = _clean_max_length(parsed, max_length)
        existing = await self.field_repo.list_by_category(category_id)
        if any(f.name == clean for f in existing):
            raise ConflictException(
                f"Field name already exists in category: {clean}",
                resource_type="field",
                value=clean,
            )
        return await self.field_repo.create_field(
            category_id,
            clean,
            parsed,
            required=required,
            display_order=order,
            max_length=limit,
        )

    async def list_fields(self, category_id: str) -> list[FieldDefinitionResult]:
        """Fields ordered by display order, ties broken by id."""
        return await self.field_repo.list_by_category(category_id)

    async def remove_field(self, ctx: RequestContext, field_id: str) -> None:
        """Delete a field definition; values stored for it are kept but no longer read."""
        if not await self.field_repo.delete_field(field_id):
            raise ResourceNotFoundException("field", field_id)

    async def change_field_type(
        self, ctx: RequestContext, field_id: str, new_type: FieldType | str
    ) -> FieldDefinitionResult:
        """Change a field's type tag. Values already stored are not converted."""
        field = await self._require_field(field_id)
        parsed = FieldType.parse(new_type)
        updated = await self.field_repo.update_field(
            field_id, field_type=parsed, clear_max_length=not parsed.is_text
        )
        assert updated is not None
        logger.info(
            "Field type changed: id=%s %s -> %s (stored values not converted)",
            field_id,
            field.field_type.value,
            parsed.value,
        )
        return updated

    async def _set_status(
        self, category_id: str, status: CategoryStatus
    ) -> CategoryResult:
        category = await self._require_category(category_id)
        if category.status != status.value:
            updated = await self.category_repo.update_category(
                category_id, status=status.value
            )
            assert updated is not None
            category = updated
        return await self._with_fields(category)

    async def retire_category(self, ctx: RequestContext, category_id: str) -> CategoryResult:
        """Mark obsolete (idempotent). Existing documents are untouched; the name stays reserved."""
        return await self._set_status(category_id, CategoryStatus.OBSOLETE)

    async def reactivate_category(
        self, ctx: RequestContext, category_id: str
    ) -> CategoryResult:
        return await self._set_status(category_id, CategoryStatus.ACTIVE)

    async def rename_category(
        self, ctx: RequestContext, category_id: str, new_name: str
    ) -> CategoryResult:
        """Rename; conflicts only with a different category. Same name is a no-op."""
        category = await self._require_category(category_id)
        clean = _clean_name(new_name, "name")
        if clean != category.name:
            if await self.category_repo.name_taken(clean, exclude_id=category_id):
                raise ConflictException(
                    f"Category name already exists: {clean}",
                    resource_type="category",
                    value=clean,
                )
            updated = await self.category_repo.update_category(category_id, name=clean)
            assert updated is not None
            category = updated
        return await self._with_fields(category)

    async def update_description(
        self, ctx: RequestContext, category_id: str, description: str
    ) -> CategoryResult:
        await self._require_category(category_id)
        updated = await self.category_repo.update_category(
            category_id, description=description
        )
        assert updated is not None
        return await self._with_fields(updated)

    async def get_category(self, category_id: str) -> CategoryResult | None:
        """Category with its ordered fields, or None."""
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            return None
        return await self._with_fields(category)

    async def list_categories(
        self, active_only: bool = True, limit: int = 100, offset: int = 0
    ) -> list[CategoryListItem]:
        return await self.category_repo.list_with_counts(
            active_only=active_only, skip=offset, limit=limit
        )

    async def count_categories(self, active_only: bool = True) -> int:
        return await self.category_repo.count(active_only=active_only)
