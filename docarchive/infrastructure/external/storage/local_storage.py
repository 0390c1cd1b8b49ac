"""Local filesystem attachment storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import os
import tempfile
from pathlib import Path, PurePath

import aiofiles
import aiofiles.os

from docarchive.application.interfaces.storage import StoredFile
from docarchive.infrastructure.exceptions import (
    AttachmentRejectedError,
    StorageDeleteError,
    StoragePermissionError,
    StorageUploadError,
)
from docarchive.shared.telemetry.logging import get_logger
from docarchive.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


class LocalAttachmentStorage:
    """Stores attachments under storage_root/<document_id>/<cuid>.<ext>.

    Paths are validated against storage_root. Writes use temp file + rename,
    so a failed write never leaves a partial file behind.
    """

    def __init__(
        self,
        storage_root: str,
        allowed_extensions: frozenset[str],
        max_size: int,
    ) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.allowed_extensions = allowed_extensions
        self.max_size = max_size
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        return full_path

    def _check(self, filename: str, content: bytes) -> str:
        """Return the lower-cased extension or raise AttachmentRejectedError."""
        extension = PurePath(filename).suffix.lower().lstrip(".")
        if not extension or extension not in self.allowed_extensions:
            raise AttachmentRejectedError(
                filename,
                f"extension not allowed; accepted: {', '.join(sorted(self.allowed_extensions))}",
            )
        if not content:
            raise AttachmentRejectedError(filename, "empty file")
        if len(content) > self.max_size:
            raise AttachmentRejectedError(
                filename, f"larger than {self.max_size} bytes"
            )
        return extension

    async def store_file(
        self,
        document_id: str,
        filename: str,
        content: bytes,
        mime_type: str,
    ) -> StoredFile:
        extension = self._check(filename, content)
        storage_ref = f"{document_id}/{generate_cuid()}.{extension}"
        target_path = self._get_full_path(storage_ref)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageUploadError(storage_ref, str(e)) from e
        checksum = hashlib.sha256(content).hexdigest()
        logger.info(
            "Attachment stored: ref=%s size=%d mime=%s", storage_ref, len(content), mime_type
        )
        return StoredFile(storage_ref=storage_ref, size=len(content), checksum=checksum)

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and its document directory when empty. Returns True if deleted."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
            parent = file_path.parent
            if parent != self.storage_root and not any(parent.iterdir()):
                parent.rmdir()
        except OSError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e
        return True
