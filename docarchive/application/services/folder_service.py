"""Folder service: physical folders holding the paper originals of documents."""

from __future__ import annotations

from typing import Any

from docarchive.application.dtos.folder import FolderListItem, FolderResult
from docarchive.application.interfaces.repositories import IFolderRepository
from docarchive.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from docarchive.shared.context import RequestContext

UPDATABLE_FIELDS = frozenset({"number", "label", "title", "description"})


def _clean_number(number: Any) -> int:
    if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
        raise ValidationException(
            "Folder number must be a positive integer", field="number", reason="InvalidValue"
        )
    return number


def _clean_label(label: str | None) -> str:
    clean = (label or "").strip()
    if not clean:
        raise ValidationException("label must not be empty", field="label", reason="EmptyName")
    return clean


def _clean_title(title: str | None) -> str | None:
    clean = (title or "").strip()
    return clean or None


class FolderService:
    """Folder CRUD with unique label and (optional) unique title."""

    def __init__(self, folder_repo: IFolderRepository) -> None:
        self.folder_repo = folder_repo

    async def _ensure_unique(
        self, label: str | None, title: str | None, exclude_id: str | None = None
    ) -> None:
        if label is not None and await self.folder_repo.label_taken(label, exclude_id):
            raise ConflictException(
                f"Folder label already exists: {label}", resource_type="folder", value=label
            )
        if title is not None and await self.folder_repo.title_taken(title, exclude_id):
            raise ConflictException(
                f"Folder title already exists: {title}", resource_type="folder", value=title
            )

    async def create_folder(
        self,
        ctx: RequestContext,
        number: int,
        label: str,
        title: str | None = None,
        description: str | None = None,
    ) -> FolderResult:
        """Create a folder.

        Raises:
            ValidationException: Non-positive number or empty label.
            ConflictException: Label or title already used.
        """
        clean_number = _clean_number(number)
        clean_label = _clean_label(label)
        clean_title = _clean_title(title)
        await self._ensure_unique(clean_label, clean_title)
        return await self.folder_repo.create_folder(
            clean_number,
            clean_label,
            title=clean_title,
            description=description,
            created_by=ctx.user_id,
        )

    async def update_folder(
        self, ctx: RequestContext, folder_id: str, changes: dict[str, Any]
    ) -> FolderResult:
        """Apply allow-listed changes; label and title stay unique across folders."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Cannot update folder fields: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
                reason="InvalidValue",
            )
        if not await self.folder_repo.get_by_id(folder_id):
            raise ResourceNotFoundException("folder", folder_id)
        clean: dict[str, Any] = dict(changes)
        if "number" in clean:
            clean["number"] = _clean_number(clean["number"])
        if "label" in clean:
            clean["label"] = _clean_label(clean["label"])
        if "title" in clean:
            clean["title"] = _clean_title(clean["title"])
        await self._ensure_unique(clean.get("label"), clean.get("title"), exclude_id=folder_id)
        updated = await self.folder_repo.update_folder(folder_id, clean)
        assert updated is not None
        return updated

    async def get_folder(self, folder_id: str) -> FolderResult | None:
        return await self.folder_repo.get_by_id(folder_id)

    async def list_folders(self, limit: int = 100, offset: int = 0) -> list[FolderListItem]:
        return await self.folder_repo.list_with_counts(skip=offset, limit=limit)

    async def count_folders(self) -> int:
        return await self.folder_repo.count()

    async def delete_folder(self, ctx: RequestContext, folder_id: str) -> None:
        """Delete an empty folder.

        Raises:
            ResourceNotFoundException: Unknown folder.
            ConflictException: Folder still holds documents.
        """
        if not await self.folder_repo.get_by_id(folder_id):
            raise ResourceNotFoundException("folder", folder_id)
        if await self.folder_repo.document_count(folder_id) > 0:
            raise ConflictException(
                "Folder still holds documents", resource_type="folder", value=folder_id
            )
        await self.folder_repo.delete_folder(folder_id)
