"""DocumentFieldValue ORM model: one EAV row per (document, field).

Four nullable typed slots; exactly one is populated, chosen by the field's
FieldType at write time. field_id has no foreign key: removing a field
definition leaves its rows in place (orphaned, skipped on read).
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from docarchive.infrastructure.persistence.database import Base
from docarchive.infrastructure.persistence.models.mixins import CuidMixin
from docarchive.infrastructure.persistence.types import ExactNumeric

_ONE_SLOT = (
    "(CASE WHEN value_text IS NOT NULL THEN 1 ELSE 0 END)"
    " + (CASE WHEN value_numeric IS NOT NULL THEN 1 ELSE 0 END)"
    " + (CASE WHEN value_date IS NOT NULL THEN 1 ELSE 0 END)"
    " + (CASE WHEN value_boolean IS NOT NULL THEN 1 ELSE 0 END) = 1"
)


class DocumentFieldValue(CuidMixin, Base):
    """EAV value row. Table: document_field_value. Deleted with its document (CASCADE)."""

    __tablename__ = "document_field_value"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False, index=True
    )
    field_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    value_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    value_numeric: Mapped[Decimal | None] = mapped_column(ExactNumeric, nullable=True)
    value_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    value_boolean: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "document_id", "field_id", name="uq_document_field_value_document_field"
        ),
        CheckConstraint(_ONE_SLOT, name="ck_document_field_value_one_slot"),
    )
