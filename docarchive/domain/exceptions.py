"""Domain exceptions for the document archive.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DocArchiveException(Exception):
    """Base exception for all document archive errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DocArchiveException):
    """Raised when input validation fails (coercion, unknown field/type, bad status).

    reason narrows the failure for callers that need to branch on it
    (e.g. 'FieldTooLong', 'UnknownType', 'UnknownField', 'InvalidStatus').
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize with message, optional field name and optional reason.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            reason: Optional short machine-readable cause.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if reason:
            details["reason"] = reason
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field
        self.reason = reason


class ConflictException(DocArchiveException):
    """Raised when a uniqueness rule is violated (category name, folder label)."""

    def __init__(
        self, message: str, resource_type: str, value: str | None = None
    ) -> None:
        """Initialize with message and the conflicting value.

        Args:
            message: Human-readable description.
            resource_type: Resource kind (e.g. 'category', 'folder').
            value: The value that collided, when known.
        """
        super().__init__(
            message,
            "CONFLICT",
            {"resource_type": resource_type, "value": value},
        )


class ResourceNotFoundException(DocArchiveException):
    """Raised when a referenced resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'category', 'folder').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AuthorizationException(DocArchiveException):
    """Raised when the caller lacks required permissions for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'document', 'category').
            action: Optional action that was attempted (e.g. 'create').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class PersistenceException(DocArchiveException):
    """Raised when the database fails in a way not covered by the rules above.

    The message never carries driver text; the original error is chained and logged.
    """

    def __init__(self, operation: str = "database operation") -> None:
        super().__init__(
            f"Storage failure during {operation}",
            "STORAGE_ERROR",
            {"operation": operation},
        )
