"""Request context passed explicitly into every core write operation.

The auth/session and authorization collaborators resolve who is calling;
the core only receives the result. Nothing in the core reads ambient
session state.

Usage:
    ctx = RequestContext(user_id="user123", role=Role.ADMINISTRATOR)
    await service.create_category(ctx, "Audit")
"""

from __future__ import annotations

from dataclasses import dataclass

from docarchive.domain.enums import Role


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current caller (already authenticated and authorized)."""

    user_id: str | None
    role: Role | None = None

    @classmethod
    def system(cls) -> RequestContext:
        """Context for scripts and maintenance jobs (no user, administrator rights)."""
        return cls(user_id=None, role=Role.ADMINISTRATOR)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def is_student(self) -> bool:
        return self.role is Role.STUDENT

    @property
    def is_administrator(self) -> bool:
        return self.role is Role.ADMINISTRATOR

    def owns(self, created_by: str | None) -> bool:
        """True when the caller created the resource."""
        return created_by is not None and created_by == self.user_id
