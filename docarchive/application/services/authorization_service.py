"""Authorization service: static role permission table and context checks."""

from __future__ import annotations

from docarchive.domain.enums import Role
from docarchive.domain.exceptions import AuthorizationException
from docarchive.shared.context import RequestContext

_CRUD = ("create", "update", "delete")

ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.ADMINISTRATOR: frozenset(
        {f"{r}:{a}" for r in ("user", "document", "folder", "category") for a in _CRUD}
        | {"report:read", "settings:read"}
    ),
    Role.ADMINISTRATIVE_STAFF: frozenset(
        {f"{r}:{a}" for r in ("document", "folder") for a in _CRUD}
        | {"category:create", "category:update", "report:read"}
    ),
    Role.STUDENT: frozenset(
        {"document:create", "document:update", "folder:create", "folder:update"}
    ),
}


class AuthorizationService:
    """Centralized permission checking against ROLE_PERMISSIONS."""

    def permissions_for(self, role: Role | None) -> frozenset[str]:
        """Return permission codes (e.g. document:create) granted to a role."""
        if role is None:
            return frozenset()
        return ROLE_PERMISSIONS.get(role, frozenset())

    def check_permission(self, ctx: RequestContext, resource: str, action: str) -> bool:
        """Return True if the caller's role grants resource:action."""
        return f"{resource}:{action}" in self.permissions_for(ctx.role)

    def require_permission(self, ctx: RequestContext, resource: str, action: str) -> None:
        """Raise AuthorizationException if the caller lacks resource:action."""
        if not self.check_permission(ctx, resource, action):
            raise AuthorizationException(resource=resource, action=action)

    def can_access_document(self, ctx: RequestContext, created_by: str | None) -> bool:
        """Students only see and edit their own documents; other roles see all."""
        if ctx.is_student:
            return ctx.owns(created_by)
        return ctx.role is not None

    def require_document_access(
        self, ctx: RequestContext, created_by: str | None, action: str = "read"
    ) -> None:
        if not self.can_access_document(ctx, created_by):
            raise AuthorizationException(resource="document", action=action)
