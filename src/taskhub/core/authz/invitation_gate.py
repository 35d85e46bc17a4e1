"""Who may invite, and which roles they may hand out."""

from typing import Final

from src.taskhub.core.authz.errors import RoleGrantDenied
from src.taskhub.core.authz.requirements import ExactSet
from src.taskhub.core.authz.roles import rank
from src.taskhub.models.enums import OrganizationRole

INVITER_ROLES: Final[frozenset[OrganizationRole]] = frozenset(
    {OrganizationRole.OWNER, OrganizationRole.ADMIN}
)

# Route requirement for create/list/revoke/resend of invitations
MANAGE_INVITATIONS: Final[ExactSet] = ExactSet(INVITER_ROLES)


def can_invite(inviter_role: OrganizationRole) -> bool:
    return inviter_role in INVITER_ROLES


def can_grant_role(inviter_role: OrganizationRole, requested_role: OrganizationRole) -> bool:
    """OWNER grants anything. ADMIN grants up to its own rank but never OWNER."""
    if not can_invite(inviter_role):
        return False
    if inviter_role is OrganizationRole.OWNER:
        return True
    return requested_role is not OrganizationRole.OWNER and rank(requested_role) <= rank(
        inviter_role
    )


def ensure_can_grant(inviter_role: OrganizationRole, requested_role: OrganizationRole) -> None:
    if not can_invite(inviter_role):
        raise RoleGrantDenied(f"{inviter_role.value} may not invite")
    if not can_grant_role(inviter_role, requested_role):
        raise RoleGrantDenied(f"{inviter_role.value} may not grant {requested_role.value}")
