"""Attachment storage factory: builds the configured backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docarchive.application.interfaces.storage import IAttachmentStorage

if TYPE_CHECKING:
    from docarchive.core.config import Settings


class StorageFactory:
    """Factory for attachment storage instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: "Settings | None" = None) -> IAttachmentStorage:
        """Create storage service from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Raises:
            ValueError: STORAGE_ROOT is empty.
        """
        from docarchive.core.config import get_settings
        from docarchive.infrastructure.external.storage.local_storage import (
            LocalAttachmentStorage,
        )

        s = settings or get_settings()
        if not s.storage_root:
            raise ValueError("STORAGE_ROOT required for local attachment storage")
        return LocalAttachmentStorage(
            storage_root=s.storage_root,
            allowed_extensions=s.allowed_extension_set,
            max_size=s.max_upload_size,
        )
