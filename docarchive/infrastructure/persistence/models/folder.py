"""Folder ORM model. Physical folder that holds paper originals of documents."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docarchive.infrastructure.persistence.database import Base
from docarchive.infrastructure.persistence.models.mixins import ArchiveModel


class Folder(ArchiveModel, Base):
    """Physical folder. Table: folder. Unique label and (optional) title."""

    __tablename__ = "folder"

    number: Mapped[int] = mapped_column(Integer, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    title: Mapped[str | None] = mapped_column(String(150), nullable=True, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
