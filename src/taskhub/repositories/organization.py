"""Repository for Organization entity."""

from uuid import UUID

from sqlmodel import select

from src.taskhub.models import Membership, Organization
from src.taskhub.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization

    async def list_for_user(self, user_id: UUID) -> list[tuple[Organization, str]]:
        """Organizations the user belongs to, paired with the stored role."""
        result = await self.session.execute(
            select(Organization, Membership.role)
            .join(Membership, Membership.organization_id == Organization.id)  # type: ignore[arg-type]
            .where(Membership.user_id == user_id)
            .order_by(Organization.created_at)  # type: ignore[arg-type]
        )
        return [(org, role) for org, role in result.all()]

    async def has_children(self, organization_id: UUID) -> bool:
        result = await self.session.execute(
            select(Organization.id).where(Organization.parent_id == organization_id).limit(1)
        )
        return result.first() is not None

    async def list_children(self, organization_id: UUID) -> list[Organization]:
        result = await self.session.execute(
            select(Organization)
            .where(Organization.parent_id == organization_id)
            .order_by(Organization.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
