"""Attachment storage interface (port). Implementation: LocalAttachmentStorage."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredFile:
    """Result of a successful store: where the bytes live and what they were."""

    storage_ref: str
    size: int
    checksum: str


class IAttachmentStorage(Protocol):
    """Protocol for attachment backends (DIP)."""

    async def store_file(
        self,
        document_id: str,
        filename: str,
        content: bytes,
        mime_type: str,
    ) -> StoredFile:
        """Persist content for a document. Raises StorageException on failure."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...
