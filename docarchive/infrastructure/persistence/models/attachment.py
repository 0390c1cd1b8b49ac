"""Attachment ORM model. Digital file stored for a document."""

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from docarchive.infrastructure.persistence.database import Base
from docarchive.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class Attachment(CuidMixin, CreatedAtMixin, Base):
    """Attachment record. Table: attachment. Deleted with its document (CASCADE)."""

    __tablename__ = "attachment"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False, index=True
    )
    storage_ref: Mapped[str] = mapped_column(String, nullable=False)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    checksum: Mapped[str] = mapped_column(String(64), nullable=False)
