"""DocumentValueStore against SQLite: one slot per row, all-or-nothing batches, orphans."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from docarchive.application.dtos.category import CategoryResult, FieldDefinitionCreate
from docarchive.application.services.category_schema_service import CategorySchemaService
from docarchive.application.services.document_value_store import DocumentValueStore
from docarchive.application.services.folder_service import FolderService
from docarchive.application.use_cases.documents import DocumentAggregateService
from docarchive.domain.exceptions import ValidationException
from docarchive.domain.field_types import ValueSlot
from docarchive.shared.context import RequestContext


@pytest.fixture
async def category(
    category_service: CategorySchemaService, ctx: RequestContext
) -> CategoryResult:
    return await category_service.create_category(
        ctx,
        "Enrollment",
        fields=[
            FieldDefinitionCreate(name="student", field_type="short_text", max_length=10),
            FieldDefinitionCreate(name="credits", field_type="integer", display_order=2),
            FieldDefinitionCreate(name="fee", field_type="decimal", display_order=3),
            FieldDefinitionCreate(name="enrolled_on", field_type="date", display_order=4),
            FieldDefinitionCreate(name="scholarship", field_type="boolean", display_order=5),
        ],
    )


@pytest.fixture
async def document_id(
    category: CategoryResult,
    folder_service: FolderService,
    document_service: DocumentAggregateService,
    ctx: RequestContext,
) -> str:
    folder = await folder_service.create_folder(ctx, 1, "F1")
    document = await document_service.create_document(
        ctx, category.id, folder.id, date(2024, 2, 1)
    )
    return document.id


def _ids(category: CategoryResult) -> dict[str, str]:
    return {f.name: f.id for f in category.fields}


async def test_values_round_trip_with_native_types(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    written = await value_store.set_values(
        document_id,
        category.id,
        {
            ids["student"]: "Ana",
            ids["credits"]: "12",
            ids["fee"]: "150.75",
            ids["enrolled_on"]: "2024-02-01",
            ids["scholarship"]: "yes",
        },
    )
    values = await value_store.get_values(document_id)

    assert written == 5
    assert values[ids["student"]].value == "Ana"
    assert values[ids["credits"]].value == 12
    assert values[ids["fee"]].value == Decimal("150.75")
    assert values[ids["enrolled_on"]].value == date(2024, 2, 1)
    assert values[ids["scholarship"]].value is True
    assert values[ids["fee"]].field_name == "fee"


async def test_each_row_has_exactly_one_slot(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    await value_store.set_values(
        document_id, category.id, {ids["credits"]: 3, ids["scholarship"]: False}
    )
    rows = {r.field_id: r for r in await value_store.get_raw_rows(document_id)}
    assert rows[ids["credits"]].populated_slots() == [ValueSlot.NUMERIC]
    assert rows[ids["scholarship"]].populated_slots() == [ValueSlot.BOOLEAN]


async def test_overwrite_replaces_value(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    await value_store.set_values(document_id, category.id, {ids["credits"]: 3})
    await value_store.set_values(document_id, category.id, {ids["credits"]: 4})
    rows = await value_store.get_raw_rows(document_id)
    assert len(rows) == 1
    assert (await value_store.get_values(document_id))[ids["credits"]].value == 4


async def test_wide_numbers_read_back_exactly(
    value_store: DocumentValueStore,
    category: CategoryResult,
    document_id: str,
    db_session: AsyncSession,
) -> None:
    ids = _ids(category)
    await value_store.set_values(
        document_id,
        category.id,
        {ids["credits"]: 123456789012345678, ids["fee"]: Decimal("12345678.1234567891")},
    )
    db_session.expire_all()

    values = await value_store.get_values(document_id)
    assert values[ids["credits"]].value == 123456789012345678
    assert values[ids["fee"]].value == Decimal("12345678.1234567891")


async def test_numbers_beyond_slot_precision_write_nothing(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    with pytest.raises(ValidationException) as exc_info:
        await value_store.set_values(
            document_id,
            category.id,
            {ids["credits"]: 12345678901234567891, ids["fee"]: "1.5"},
        )
    assert exc_info.value.reason == "InvalidValue"
    assert exc_info.value.field == "credits"
    assert await value_store.get_raw_rows(document_id) == []


async def test_invalid_value_writes_nothing(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    with pytest.raises(ValidationException) as exc_info:
        await value_store.set_values(
            document_id,
            category.id,
            {ids["student"]: "Ana", ids["credits"]: "twelve"},
        )
    assert exc_info.value.reason == "InvalidValue"
    assert exc_info.value.field == "credits"
    assert await value_store.get_raw_rows(document_id) == []


async def test_too_long_text_rejected(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    with pytest.raises(ValidationException) as exc_info:
        await value_store.set_values(document_id, category.id, {ids["student"]: "x" * 11})
    assert exc_info.value.reason == "FieldTooLong"


async def test_unknown_field_rejected(
    value_store: DocumentValueStore,
    category: CategoryResult,
    category_service: CategorySchemaService,
    document_id: str,
    ctx: RequestContext,
) -> None:
    other = await category_service.create_category(
        ctx, "Audit", fields=[FieldDefinitionCreate(name="score", field_type="integer")]
    )
    ids = _ids(category)
    with pytest.raises(ValidationException) as exc_info:
        await value_store.set_values(
            document_id,
            category.id,
            {ids["credits"]: 1, other.fields[0].id: 5},
        )
    assert exc_info.value.reason == "UnknownField"
    assert await value_store.get_raw_rows(document_id) == []


async def test_blank_value_clears_field(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    await value_store.set_values(
        document_id, category.id, {ids["student"]: "Ana", ids["credits"]: 2}
    )
    await value_store.set_values(document_id, category.id, {ids["student"]: "  "})
    values = await value_store.get_values(document_id)
    assert ids["student"] not in values
    assert values[ids["credits"]].value == 2


async def test_required_fields_enforced_on_request(
    value_store: DocumentValueStore,
    category_service: CategorySchemaService,
    category: CategoryResult,
    document_id: str,
    ctx: RequestContext,
) -> None:
    required = await category_service.add_field(
        ctx, category.id, "code", "short_text", required=True, order=9
    )
    with pytest.raises(ValidationException) as exc_info:
        await value_store.set_values(
            document_id, category.id, {_ids(category)["credits"]: 1}, enforce_required=True
        )
    assert exc_info.value.reason == "RequiredField"

    await value_store.set_values(
        document_id, category.id, {required.id: "A-1"}, enforce_required=True
    )
    with pytest.raises(ValidationException):
        await value_store.set_values(
            document_id, category.id, {required.id: None}, enforce_required=True
        )


async def test_orphaned_rows_are_skipped(
    value_store: DocumentValueStore,
    category_service: CategorySchemaService,
    category: CategoryResult,
    document_id: str,
    ctx: RequestContext,
) -> None:
    ids = _ids(category)
    await value_store.set_values(
        document_id, category.id, {ids["student"]: "Ana", ids["credits"]: 2}
    )
    await category_service.remove_field(ctx, ids["credits"])

    values = await value_store.get_values(document_id)
    rows = await value_store.get_raw_rows(document_id)

    assert set(values) == {ids["student"]}
    assert {r.field_id for r in rows} == {ids["student"], ids["credits"]}


async def test_delete_values(
    value_store: DocumentValueStore, category: CategoryResult, document_id: str
) -> None:
    ids = _ids(category)
    await value_store.set_values(document_id, category.id, {ids["student"]: "Ana"})
    assert await value_store.delete_values(document_id) == 1
    assert await value_store.get_values(document_id) == {}
