"""Repository for Membership entity."""

from uuid import UUID

from sqlmodel import select

from src.taskhub.models import Membership, OrganizationRole, User
from src.taskhub.repositories.base import BaseRepository


class MembershipRepository(BaseRepository[Membership]):
    """Read side of the membership store plus the two creation paths."""

    model = Membership

    async def get_membership(self, user_id: UUID, organization_id: UUID) -> Membership | None:
        """Point lookup by (user, organization)."""
        result = await self.session.execute(
            select(Membership).where(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def is_member(self, user_id: UUID, organization_id: UUID) -> bool:
        membership = await self.get_membership(user_id, organization_id)
        return membership is not None

    async def list_members(self, organization_id: UUID) -> list[tuple[Membership, User]]:
        result = await self.session.execute(
            select(Membership, User)
            .join(User, User.id == Membership.user_id)  # type: ignore[arg-type]
            .where(Membership.organization_id == organization_id)
            .order_by(Membership.created_at)  # type: ignore[arg-type]
        )
        return [(membership, user) for membership, user in result.all()]

    def create_membership(
        self,
        user_id: UUID,
        organization_id: UUID,
        role: OrganizationRole = OrganizationRole.VIEWER,
    ) -> Membership:
        """Create a new membership (add to session, no commit)."""
        membership = Membership(
            user_id=user_id,
            organization_id=organization_id,
            role=role.value,
        )
        self.session.add(membership)
        return membership
