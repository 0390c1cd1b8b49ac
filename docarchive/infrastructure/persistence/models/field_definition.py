"""FieldDefinition ORM model. One typed, orderable attribute of a category."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from docarchive.infrastructure.persistence.database import Base
from docarchive.infrastructure.persistence.models.mixins import ArchiveModel


class FieldDefinition(ArchiveModel, Base):
    """Dynamic field definition. Table: field_definition.

    Ordered by (display_order, id). Deleted with its category (CASCADE).
    """

    __tablename__ = "field_definition"

    category_id: Mapped[str] = mapped_column(
        String, ForeignKey("category.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_type: Mapped[str] = mapped_column(String(20), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_length: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index(
            "ix_field_definition_category_order",
            "category_id",
            "display_order",
            "id",
        ),
    )
