"""Infrastructure exceptions for attachment storage.

Storage errors extend DocArchiveException so presentation can map them
to HTTP responses consistently.
"""

from docarchive.domain.exceptions import DocArchiveException


class StorageException(DocArchiveException):
    """Base exception for storage operations."""


class StorageUploadError(StorageException):
    """File write failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class AttachmentRejectedError(StorageException):
    """Upload refused before writing (extension not allowed, empty or too large)."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(
            f"Attachment rejected: {filename} ({reason})",
            "ATTACHMENT_REJECTED",
            {"filename": filename, "reason": reason},
        )
