"""Category ORM model. Administrator-defined document type owning an ordered field schema."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docarchive.domain.enums import CategoryStatus
from docarchive.infrastructure.persistence.database import Base
from docarchive.infrastructure.persistence.models.mixins import ArchiveModel


class Category(ArchiveModel, Base):
    """Document category. Table: category. Unique name; never physically deleted."""

    __tablename__ = "category"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CategoryStatus.ACTIVE.value, index=True
    )
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
