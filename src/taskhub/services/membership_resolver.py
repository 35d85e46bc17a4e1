"""Resolve a caller's role inside one organization."""

from uuid import UUID

from src.taskhub.core.authz import parse_role
from src.taskhub.core.logging import get_logger
from src.taskhub.models import OrganizationRole
from src.taskhub.repositories import MembershipRepository

logger = get_logger(__name__)


class MembershipResolver:
    """Live read of the membership store. Nothing is cached between calls."""

    def __init__(self, membership_repo: MembershipRepository):
        self.membership_repo = membership_repo

    async def resolve(self, user_id: UUID, organization_id: UUID) -> OrganizationRole | None:
        """Return the caller's role, or None when there is no membership."""
        membership = await self.membership_repo.get_membership(user_id, organization_id)
        if membership is None:
            return None

        role = parse_role(membership.role)
        if role is None:
            # Unknown stored value: deny rather than guess a rank
            logger.warning(
                "Membership has unrecognised role",
                user_id=str(user_id),
                organization_id=str(organization_id),
                role=membership.role,
            )
        return role
