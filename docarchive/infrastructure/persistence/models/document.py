"""Document ORM model. Fixed metadata of a document; dynamic values live in document_field_value."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from docarchive.domain.enums import BackupStatus, ManagementStatus
from docarchive.infrastructure.persistence.database import Base
from docarchive.infrastructure.persistence.models.mixins import ArchiveModel


class Document(ArchiveModel, Base):
    """Document record. Table: document. Category is fixed at creation."""

    __tablename__ = "document"

    category_id: Mapped[str] = mapped_column(
        String, ForeignKey("category.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    folder_id: Mapped[str] = mapped_column(
        String, ForeignKey("folder.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    created_by: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    document_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    management_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ManagementStatus.PENDING.value
    )
    backup_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BackupStatus.NOT_BACKED_UP.value
    )

    __table_args__ = (
        Index("ix_document_management_status", "management_status"),
        Index("ix_document_backup_status", "backup_status"),
        Index("ix_document_created_at_id", "created_at", "id"),
    )
