"""Attachment storage backends."""

from docarchive.infrastructure.external.storage.factory import StorageFactory
from docarchive.infrastructure.external.storage.local_storage import (
    LocalAttachmentStorage,
)

__all__ = ["LocalAttachmentStorage", "StorageFactory"]
