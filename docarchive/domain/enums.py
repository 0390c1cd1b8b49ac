"""Domain enumerations for the document archive.

Enums represent fixed sets of domain values (statuses, roles). The field type
set lives in docarchive.domain.field_types together with its coercion rules.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class CategoryStatus(_ValuesMixin, str, Enum):
    """Category lifecycle status. Obsolete categories accept no new documents."""

    ACTIVE = "active"
    OBSOLETE = "obsolete"


class ManagementStatus(_ValuesMixin, str, Enum):
    """Document workflow status.

    Any value may follow any other; transitions are not enforced.
    """

    PENDING = "pending"
    IN_REVIEW = "in_review"
    ARCHIVED = "archived"
    CANCELLED = "cancelled"


class BackupStatus(_ValuesMixin, str, Enum):
    """Whether a document has a verified digital backup copy."""

    NOT_BACKED_UP = "not_backed_up"
    BACKED_UP = "backed_up"


class Role(_ValuesMixin, str, Enum):
    """Caller roles supplied by the authorization collaborator."""

    ADMINISTRATOR = "administrator"
    ADMINISTRATIVE_STAFF = "administrative_staff"
    STUDENT = "student"
