"""Document value store: typed EAV writes and reads for a document's dynamic fields.

Write path: every field id must belong to the document's category; all
values are coerced before the first row is touched, so a batch either
lands completely or not at all. Blank values clear the field.

Read path: rows are joined against the current field definitions and the
single populated slot is returned as the value, paired with the field's
current type. Rows whose definition was removed are skipped.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from docarchive.application.dtos.category import FieldDefinitionResult
from docarchive.application.dtos.document import FieldValue, StoredFieldValue
from docarchive.application.interfaces.repositories import (
    IFieldDefinitionRepository,
    IFieldValueRepository,
)
from docarchive.domain.exceptions import ValidationException
from docarchive.domain.field_types import FieldType, ValueSlot, is_blank
from docarchive.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _trim_decimal(value: Decimal) -> Decimal:
    """Drop the scale padding the numeric column adds (7.0000000000 -> 7)."""
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()


def stored_value(row: StoredFieldValue, field_type: FieldType) -> Any:
    """Value of the populated slot, shaped for the field's current type.

    The slot is not re-checked against the type: after a type change the
    old slot is returned as stored.
    """
    for slot in ValueSlot:
        value = getattr(row, slot.column)
        if value is None:
            continue
        if slot is ValueSlot.NUMERIC:
            number = value if isinstance(value, Decimal) else Decimal(str(value))
            number = _trim_decimal(number)
            if field_type is FieldType.INTEGER and number == number.to_integral_value():
                return int(number)
            return number
        return value
    return None


class DocumentValueStore:
    """Typed EAV values of documents over field definition and value repositories."""

    def __init__(
        self,
        field_repo: IFieldDefinitionRepository,
        value_repo: IFieldValueRepository,
    ) -> None:
        self.field_repo = field_repo
        self.value_repo = value_repo

    async def set_values(
        self,
        document_id: str,
        category_id: str,
        values_by_field_id: Mapping[str, Any],
        *,
        enforce_required: bool = False,
    ) -> int:
        """Persist a batch of raw values; returns the number of rows written or cleared.

        Raises:
            ValidationException: UnknownField when a field id is not part of the
                category; InvalidValue/FieldTooLong from coercion; RequiredField
                when enforce_required is set and a required field ends up empty.
        """
        definitions = {
            f.id: f for f in await self.field_repo.list_by_category(category_id)
        }
        writes: list[tuple[str, ValueSlot, Any]] = []
        clears: list[str] = []
        for field_id, raw in values_by_field_id.items():
            definition = definitions.get(field_id)
            if definition is None:
                logger.warning(
                    "Rejected values for document %s: field %s not in category %s",
                    document_id,
                    field_id,
                    category_id,
                )
                raise ValidationException(
                    f"Field {field_id} does not belong to category {category_id}",
                    field=field_id,
                    reason="UnknownField",
                )
            if is_blank(raw):
                clears.append(field_id)
                continue
            try:
                coerced = definition.field_type.coerce(
                    raw, max_length=definition.max_length, field=definition.name
                )
            except ValidationException:
                logger.warning(
                    "Rejected values for document %s: invalid %s for field %s",
                    document_id,
                    definition.field_type.value,
                    definition.name,
                )
                raise
            writes.append((field_id, definition.field_type.slot, coerced))

        if enforce_required:
            await self._check_required(document_id, definitions, writes, clears)

        cleared = await self.value_repo.delete_fields(document_id, clears)
        written = await self.value_repo.upsert_many(document_id, writes)
        return written + cleared

    async def _check_required(
        self,
        document_id: str,
        definitions: dict[str, FieldDefinitionResult],
        writes: list[tuple[str, ValueSlot, Any]],
        clears: list[str],
    ) -> None:
        present = {row.field_id for row in await self.value_repo.list_for_document(document_id)}
        present.update(field_id for field_id, _, _ in writes)
        present.difference_update(clears)
        for definition in definitions.values():
            if definition.required and definition.id not in present:
                raise ValidationException(
                    f"Field '{definition.name}' is required",
                    field=definition.name,
                    reason="RequiredField",
                )

    async def get_values(self, document_id: str) -> dict[str, FieldValue]:
        """Map field id -> FieldValue for rows whose field definition still exists."""
        rows = await self.value_repo.list_for_document(document_id)
        definitions = await self.field_repo.get_by_ids(row.field_id for row in rows)
        values: dict[str, FieldValue] = {}
        for row in rows:
            definition = definitions.get(row.field_id)
            if definition is None:
                continue
            values[row.field_id] = FieldValue(
                field_name=definition.name,
                field_type=definition.field_type,
                value=stored_value(row, definition.field_type),
            )
        return values

    async def get_raw_rows(self, document_id: str) -> list[StoredFieldValue]:
        """Stored rows with all four slots, orphans included."""
        return await self.value_repo.list_for_document(document_id)

    async def delete_values(self, document_id: str) -> int:
        return await self.value_repo.delete_for_document(document_id)
