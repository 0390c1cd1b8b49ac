"""Field type registry: the closed set of scalar types a category field may declare.

Each FieldType knows which EAV value slot holds its values, its default
maximum length (text types only) and how to coerce raw input into the slot's
native Python representation. Every reader and writer of dynamic values goes
through this module; there is no other type switch in the code base.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from docarchive.domain.exceptions import ValidationException

SHORT_TEXT_MAX_LENGTH = 255

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TRUE_STRINGS = frozenset({"true", "1", "yes", "on", "si", "sí"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})

NUMERIC_INTEGER_DIGITS = 18
NUMERIC_FRACTION_DIGITS = 10

TypedValue = str | int | Decimal | date | bool


class ValueSlot(str, Enum):
    """Storage slot of an EAV row. Exactly one slot is populated per row."""

    TEXT = "text"
    NUMERIC = "numeric"
    DATE = "date"
    BOOLEAN = "boolean"

    @property
    def column(self) -> str:
        """Column name of this slot on the document_field_value table."""
        return f"value_{self.value}"


class FieldType(str, Enum):
    """Supported scalar field types (tag values are persisted)."""

    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    BOOLEAN = "boolean"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid type tags."""
        return [member.value for member in cls]

    @classmethod
    def parse(cls, tag: FieldType | str) -> FieldType:
        """Return the FieldType for a tag; raise ValidationException(UnknownType) otherwise."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError as e:
            raise ValidationException(
                f"Unknown field type: {tag!r}. Valid types: {', '.join(cls.values())}",
                field="field_type",
                reason="UnknownType",
            ) from e

    @property
    def slot(self) -> ValueSlot:
        return _SLOTS[self]

    @property
    def is_text(self) -> bool:
        return self.slot is ValueSlot.TEXT

    @property
    def default_max_length(self) -> int | None:
        return SHORT_TEXT_MAX_LENGTH if self is FieldType.SHORT_TEXT else None

    def effective_max_length(self, declared: int | None) -> int | None:
        """Max length enforced for this type given a declared limit.

        Non-text types have none. Short text never exceeds its slot limit
        even when a larger limit is declared.
        """
        if not self.is_text:
            return None
        default = self.default_max_length
        if declared is None:
            return default
        if default is None:
            return declared
        return min(declared, default)

    def coerce(
        self,
        raw: Any,
        max_length: int | None = None,
        field: str | None = None,
    ) -> TypedValue:
        """Coerce raw input to this type's stored representation.

        Args:
            raw: Arbitrary input (JSON scalar, Python scalar).
            max_length: Declared max length (text types only).
            field: Field name used in error details.

        Raises:
            ValidationException: When raw is incompatible with the type or too long.
        """
        return _COERCERS[self](self, raw, max_length, field)


_SLOTS: dict[FieldType, ValueSlot] = {
    FieldType.SHORT_TEXT: ValueSlot.TEXT,
    FieldType.LONG_TEXT: ValueSlot.TEXT,
    FieldType.INTEGER: ValueSlot.NUMERIC,
    FieldType.DECIMAL: ValueSlot.NUMERIC,
    FieldType.DATE: ValueSlot.DATE,
    FieldType.BOOLEAN: ValueSlot.BOOLEAN,
}


def _invalid(field_type: FieldType, raw: Any, field: str | None) -> ValidationException:
    return ValidationException(
        f"Value {raw!r} is not a valid {field_type.value}",
        field=field,
        reason="InvalidValue",
    )


_NUMERIC_CEILING = Decimal(10) ** NUMERIC_INTEGER_DIGITS
_NUMERIC_STEP = Decimal(1).scaleb(-NUMERIC_FRACTION_DIGITS)


def _check_numeric_range(
    field_type: FieldType, raw: Any, value: Decimal, field: str | None
) -> None:
    """Reject values the numeric slot cannot hold exactly."""
    if abs(value) >= _NUMERIC_CEILING or value != value.quantize(_NUMERIC_STEP):
        raise _invalid(field_type, raw, field)


def _coerce_text(
    field_type: FieldType, raw: Any, max_length: int | None, field: str | None
) -> str:
    if isinstance(raw, bool) or raw is None:
        raise _invalid(field_type, raw, field)
    if isinstance(raw, str):
        value = raw
    elif isinstance(raw, (int, float, Decimal)):
        value = str(raw)
    else:
        raise _invalid(field_type, raw, field)
    limit = field_type.effective_max_length(max_length)
    if limit is not None and len(value) > limit:
        raise ValidationException(
            f"Value exceeds maximum length of {limit} characters",
            field=field,
            reason="FieldTooLong",
        )
    return value


def _coerce_integer(
    field_type: FieldType, raw: Any, max_length: int | None, field: str | None
) -> int:
    if isinstance(raw, bool):
        raise _invalid(field_type, raw, field)
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    elif isinstance(raw, Decimal) and raw.is_finite() and raw == raw.to_integral_value():
        value = int(raw)
    elif isinstance(raw, str) and _INTEGER_RE.match(raw.strip()):
        value = int(raw.strip())
    else:
        raise _invalid(field_type, raw, field)
    if abs(value) >= _NUMERIC_CEILING:
        raise _invalid(field_type, raw, field)
    return value


def _coerce_decimal(
    field_type: FieldType, raw: Any, max_length: int | None, field: str | None
) -> Decimal:
    if isinstance(raw, bool):
        raise _invalid(field_type, raw, field)
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float, str)):
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation as e:
            raise _invalid(field_type, raw, field) from e
    else:
        raise _invalid(field_type, raw, field)
    if not value.is_finite():
        raise _invalid(field_type, raw, field)
    _check_numeric_range(field_type, raw, value, field)
    return value


def _coerce_date(
    field_type: FieldType, raw: Any, max_length: int | None, field: str | None
) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and _ISO_DATE_RE.match(raw.strip()):
        try:
            return date.fromisoformat(raw.strip())
        except ValueError as e:
            raise _invalid(field_type, raw, field) from e
    raise _invalid(field_type, raw, field)


def _coerce_boolean(
    field_type: FieldType, raw: Any, max_length: int | None, field: str | None
) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        token = raw.strip().lower()
        if token in _TRUE_STRINGS:
            return True
        if token in _FALSE_STRINGS:
            return False
    raise _invalid(field_type, raw, field)


_COERCERS: dict[FieldType, Callable[[FieldType, Any, int | None, str | None], Any]] = {
    FieldType.SHORT_TEXT: _coerce_text,
    FieldType.LONG_TEXT: _coerce_text,
    FieldType.INTEGER: _coerce_integer,
    FieldType.DECIMAL: _coerce_decimal,
    FieldType.DATE: _coerce_date,
    FieldType.BOOLEAN: _coerce_boolean,
}


def coerce(
    field_type: FieldType | str,
    raw: Any,
    max_length: int | None = None,
    field: str | None = None,
) -> TypedValue:
    """Coerce raw input for a type tag. Unknown tags raise ValidationException(UnknownType)."""
    return FieldType.parse(field_type).coerce(raw, max_length=max_length, field=field)


def slot_for(field_type: FieldType | str) -> ValueSlot:
    """Return the storage slot for a type tag. Unknown tags raise ValidationException(UnknownType)."""
    return FieldType.parse(field_type).slot


def is_blank(raw: Any) -> bool:
    """True when raw means 'no value' (None or whitespace-only string)."""
    return raw is None or (isinstance(raw, str) and not raw.strip())
