"""Authorization failure taxonomy.

Each error carries a public ``detail`` (category only, safe for clients) and an
internal ``reason`` that is logged and only rendered outside production when
explicitly enabled.
"""

from fastapi import status


class AuthorizationError(Exception):
    """Base class for every terminal failure of the authorization pipeline."""

    status_code: int = status.HTTP_403_FORBIDDEN
    detail: str = "Forbidden"

    def __init__(self, reason: str | None = None, *, detail: str | None = None):
        self.reason = reason
        if detail is not None:
            self.detail = detail
        super().__init__(reason or self.detail)


class Unauthenticated(AuthorizationError):
    """No credential, or a credential the identity provider rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"


class NotAMember(AuthorizationError):
    """Valid identity without a membership in the target organization."""

    detail = "Insufficient permissions for this organization"


class InsufficientRole(AuthorizationError):
    """Membership exists but does not satisfy the route requirement.

    Shares its public detail with NotAMember so probing callers cannot tell
    the two apart.
    """

    detail = NotAMember.detail


class FieldPolicyViolation(AuthorizationError):
    """Route admitted, but the payload touches fields the role may not change."""

    detail = "Not permitted to modify one or more fields"

    def __init__(self, fields: frozenset[str] | set[str], reason: str | None = None):
        self.fields = frozenset(fields)
        super().__init__(reason or f"disallowed fields: {', '.join(sorted(self.fields))}")


class RoleGrantDenied(AuthorizationError):
    """Inviter may not grant the requested role."""

    detail = "Not permitted to grant this role"


class ResourceNotFound(AuthorizationError):
    """Resource-scoped route whose target id does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"

    def __init__(self, resource_type: str, reason: str | None = None):
        self.resource_type = resource_type
        super().__init__(reason, detail=f"{resource_type.capitalize()} not found")


class MissingOrganizationContext(AuthorizationError):
    """Organization-scoped route called without any organization id."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Organization id is required"


class AuthorizationUnavailable(AuthorizationError):
    """A store behind the pipeline failed or timed out. Always a denial."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Authorization temporarily unavailable"
