"""Unit tests for the field type registry (slots, max length, coercion)."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from docarchive.domain.exceptions import ValidationException
from docarchive.domain.field_types import (
    SHORT_TEXT_MAX_LENGTH,
    FieldType,
    ValueSlot,
    coerce,
    is_blank,
    slot_for,
)


class TestSlots:
    @pytest.mark.parametrize(
        ("field_type", "slot"),
        [
            (FieldType.SHORT_TEXT, ValueSlot.TEXT),
            (FieldType.LONG_TEXT, ValueSlot.TEXT),
            (FieldType.INTEGER, ValueSlot.NUMERIC),
            (FieldType.DECIMAL, ValueSlot.NUMERIC),
            (FieldType.DATE, ValueSlot.DATE),
            (FieldType.BOOLEAN, ValueSlot.BOOLEAN),
        ],
    )
    def test_each_type_maps_to_one_slot(self, field_type: FieldType, slot: ValueSlot) -> None:
        assert field_type.slot is slot
        assert slot_for(field_type.value) is slot

    def test_slot_column_names(self) -> None:
        assert ValueSlot.NUMERIC.column == "value_numeric"
        assert ValueSlot.BOOLEAN.column == "value_boolean"

    def test_unknown_tag_raises_unknown_type(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            slot_for("currency")
        assert exc_info.value.reason == "UnknownType"

    def test_parse_is_case_insensitive(self) -> None:
        assert FieldType.parse(" Integer ") is FieldType.INTEGER


class TestMaxLength:
    def test_short_text_default(self) -> None:
        assert FieldType.SHORT_TEXT.effective_max_length(None) == SHORT_TEXT_MAX_LENGTH

    def test_short_text_never_exceeds_slot_limit(self) -> None:
        assert FieldType.SHORT_TEXT.effective_max_length(1000) == SHORT_TEXT_MAX_LENGTH
        assert FieldType.SHORT_TEXT.effective_max_length(20) == 20

    def test_long_text_unbounded_unless_declared(self) -> None:
        assert FieldType.LONG_TEXT.effective_max_length(None) is None
        assert FieldType.LONG_TEXT.effective_max_length(5000) == 5000

    def test_non_text_types_have_no_limit(self) -> None:
        assert FieldType.INTEGER.effective_max_length(10) is None


class TestCoerceText:
    def test_numbers_become_strings(self) -> None:
        assert coerce("short_text", 42) == "42"

    def test_too_long_raises_field_too_long(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            coerce(FieldType.SHORT_TEXT, "x" * 11, max_length=10, field="code")
        assert exc_info.value.reason == "FieldTooLong"
        assert exc_info.value.field == "code"

    def test_boolean_is_not_text(self) -> None:
        with pytest.raises(ValidationException):
            coerce(FieldType.LONG_TEXT, True)


class TestCoerceNumbers:
    @pytest.mark.parametrize("raw", [7, "7", " -3 ", 7.0, Decimal("12")])
    def test_integer_accepts_integral_input(self, raw: object) -> None:
        assert isinstance(coerce(FieldType.INTEGER, raw), int)

    @pytest.mark.parametrize("raw", ["7.5", 7.5, "abc", True, None, Decimal("1.1")])
    def test_integer_rejects(self, raw: object) -> None:
        with pytest.raises(ValidationException) as exc_info:
            coerce(FieldType.INTEGER, raw)
        assert exc_info.value.reason == "InvalidValue"

    def test_decimal_keeps_precision(self) -> None:
        assert coerce(FieldType.DECIMAL, "12.345") == Decimal("12.345")
        assert coerce(FieldType.DECIMAL, 0.1) == Decimal("0.1")

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "1,5", False])
    def test_decimal_rejects(self, raw: object) -> None:
        with pytest.raises(ValidationException):
            coerce(FieldType.DECIMAL, raw)

    @pytest.mark.parametrize(
        ("field_type", "raw", "expected"),
        [
            (FieldType.INTEGER, "999999999999999999", 999999999999999999),
            (FieldType.INTEGER, -(10**18) + 1, -(10**18) + 1),
            (
                FieldType.DECIMAL,
                "999999999999999999.9999999999",
                Decimal("999999999999999999.9999999999"),
            ),
            (FieldType.DECIMAL, "1.50000000000000", Decimal("1.5")),
        ],
    )
    def test_numeric_slot_limits_accepted(
        self, field_type: FieldType, raw: object, expected: object
    ) -> None:
        assert coerce(field_type, raw) == expected

    @pytest.mark.parametrize(
        ("field_type", "raw"),
        [
            (FieldType.INTEGER, 10**18),
            (FieldType.INTEGER, "-1000000000000000000"),
            (FieldType.INTEGER, Decimal("12345678901234567891")),
            (FieldType.DECIMAL, "1000000000000000000"),
            (FieldType.DECIMAL, Decimal("1234567.123456789012")),
            (FieldType.DECIMAL, "0.00000000001"),
        ],
    )
    def test_numeric_slot_overflow_rejected(self, field_type: FieldType, raw: object) -> None:
        with pytest.raises(ValidationException) as exc_info:
            coerce(field_type, raw)
        assert exc_info.value.reason == "InvalidValue"


class TestCoerceDateAndBoolean:
    def test_iso_date(self) -> None:
        assert coerce(FieldType.DATE, "2024-03-01") == date(2024, 3, 1)

    def test_datetime_truncated_to_date(self) -> None:
        assert coerce(FieldType.DATE, datetime(2024, 3, 1, 10, 30)) == date(2024, 3, 1)

    @pytest.mark.parametrize("raw", ["01/03/2024", "2024-02-30", 20240301])
    def test_date_rejects(self, raw: object) -> None:
        with pytest.raises(ValidationException):
            coerce(FieldType.DATE, raw)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(True, True), ("yes", True), ("0", False), (1, True), ("OFF", False)],
    )
    def test_boolean_tokens(self, raw: object, expected: bool) -> None:
        assert coerce(FieldType.BOOLEAN, raw) is expected

    @pytest.mark.parametrize("raw", ["maybe", 2, 1.0])
    def test_boolean_rejects(self, raw: object) -> None:
        with pytest.raises(ValidationException):
            coerce(FieldType.BOOLEAN, raw)


def test_is_blank() -> None:
    assert is_blank(None)
    assert is_blank("   ")
    assert not is_blank(0)
    assert not is_blank(False)
