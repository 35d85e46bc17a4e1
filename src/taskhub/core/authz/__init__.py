"""Authorization core: role hierarchy, route requirements and policies.

Everything here is pure. I/O (identity, membership and resource lookups)
lives in the services that feed these values.
"""

from src.taskhub.core.authz.context import (
    AuthorizationDecision,
    OrgContext,
    RequestScope,
    UserIdentity,
)
from src.taskhub.core.authz.errors import (
    AuthorizationError,
    AuthorizationUnavailable,
    FieldPolicyViolation,
    InsufficientRole,
    MissingOrganizationContext,
    NotAMember,
    ResourceNotFound,
    RoleGrantDenied,
    Unauthenticated,
)
from src.taskhub.core.authz.field_policy import TASK_UPDATE_POLICY, FieldLevelPolicy
from src.taskhub.core.authz.invitation_gate import (
    INVITER_ROLES,
    MANAGE_INVITATIONS,
    can_grant_role,
    can_invite,
    ensure_can_grant,
)
from src.taskhub.core.authz.policy import (
    FromRequest,
    FromResource,
    OrgSource,
    RoutePolicy,
    from_body,
    from_path,
    from_query,
    from_resource,
)
from src.taskhub.core.authz.requirements import ExactSet, Minimum, RoleRequirement
from src.taskhub.core.authz.roles import ROLE_RANKS, parse_role, rank, satisfies

__all__ = [
    # Roles
    "ROLE_RANKS",
    "parse_role",
    "rank",
    "satisfies",
    # Requirements
    "ExactSet",
    "Minimum",
    "RoleRequirement",
    # Route policy
    "FromRequest",
    "FromResource",
    "OrgSource",
    "RoutePolicy",
    "from_body",
    "from_path",
    "from_query",
    "from_resource",
    # Context
    "AuthorizationDecision",
    "OrgContext",
    "RequestScope",
    "UserIdentity",
    # Field policy
    "FieldLevelPolicy",
    "TASK_UPDATE_POLICY",
    # Invitations
    "INVITER_ROLES",
    "MANAGE_INVITATIONS",
    "can_grant_role",
    "can_invite",
    "ensure_can_grant",
    # Errors
    "AuthorizationError",
    "AuthorizationUnavailable",
    "FieldPolicyViolation",
    "InsufficientRole",
    "MissingOrganizationContext",
    "NotAMember",
    "ResourceNotFound",
    "RoleGrantDenied",
    "Unauthenticated",
]
