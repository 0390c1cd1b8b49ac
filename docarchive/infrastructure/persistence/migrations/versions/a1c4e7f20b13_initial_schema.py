"""initial schema: categories, fields, folders, documents, EAV values, attachments

Revision ID: a1c4e7f20b13
Revises:
Create Date: 2026-10-19

document_field_value.field_id has no foreign key: removing a field
definition leaves its values in place.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from docarchive.infrastructure.persistence.types import ExactNumeric

revision: str = "a1c4e7f20b13"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "category",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_by", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_category_name"),
    )
    op.create_index("ix_category_status", "category", ["status"], unique=False)

    op.create_table(
        "field_definition",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("category_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("field_type", sa.String(length=20), nullable=False),
        sa.Column("required", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("max_length", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_field_definition_category_order",
        "field_definition",
        ["category_id", "display_order", "id"],
        unique=False,
    )

    op.create_table(
        "folder",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=150), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("label", name="uq_folder_label"),
        sa.UniqueConstraint("title", name="uq_folder_title"),
    )
    op.create_index("ix_folder_created_by", "folder", ["created_by"], unique=False)

    op.create_table(
        "document",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("category_id", sa.String(), nullable=False),
        sa.Column("folder_id", sa.String(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("document_date", sa.Date(), nullable=False),
        sa.Column(
            "management_status",
            sa.String(length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "backup_status",
            sa.String(length=20),
            nullable=False,
            server_default="not_backed_up",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["folder_id"], ["folder.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_document_category_id", "document", ["category_id"], unique=False)
    op.create_index("ix_document_folder_id", "document", ["folder_id"], unique=False)
    op.create_index("ix_document_created_by", "document", ["created_by"], unique=False)
    op.create_index("ix_document_document_date", "document", ["document_date"], unique=False)
    op.create_index(
        "ix_document_management_status", "document", ["management_status"], unique=False
    )
    op.create_index("ix_document_backup_status", "document", ["backup_status"], unique=False)
    op.create_index("ix_document_created_at_id", "document", ["created_at", "id"], unique=False)

    op.create_table(
        "document_field_value",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("document_id", sa.String(), nullable=False),
        sa.Column("field_id", sa.String(), nullable=False),
        sa.Column("value_text", sa.Text(), nullable=True),
        sa.Column("value_numeric", ExactNumeric(), nullable=True),
        sa.Column("value_date", sa.Date(), nullable=True),
        sa.Column("value_boolean", sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "document_id", "field_id", name="uq_document_field_value_document_field"
        ),
        sa.CheckConstraint(
            "(CASE WHEN value_text IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN value_numeric IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN value_date IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN value_boolean IS NOT NULL THEN 1 ELSE 0 END) = 1",
            name="ck_document_field_value_one_slot",
        ),
    )
    op.create_index(
        "ix_document_field_value_document_id",
        "document_field_value",
        ["document_id"],
        unique=False,
    )
    op.create_index(
        "ix_document_field_value_field_id",
        "document_field_value",
        ["field_id"],
        unique=False,
    )

    op.create_table(
        "attachment",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("document_id", sa.String(), nullable=False),
        sa.Column("storage_ref", sa.String(), nullable=False),
        sa.Column("original_filename", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_attachment_document_id", "attachment", ["document_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_attachment_document_id", table_name="attachment")
    op.drop_table("attachment")
    op.drop_index("ix_document_field_value_field_id", table_name="document_field_value")
    op.drop_index("ix_document_field_value_document_id", table_name="document_field_value")
    op.drop_table("document_field_value")
    for name in (
        "ix_document_created_at_id",
        "ix_document_backup_status",
        "ix_document_management_status",
        "ix_document_document_date",
        "ix_document_created_by",
        "ix_document_folder_id",
        "ix_document_category_id",
    ):
        op.drop_index(name, table_name="document")
    op.drop_table("document")
    op.drop_index("ix_folder_created_by", table_name="folder")
    op.drop_table("folder")
    op.drop_index("ix_field_definition_category_order", table_name="field_definition")
    op.drop_table("field_definition")
    op.drop_index("ix_category_status", table_name="category")
    op.drop_table("category")
