"""Repository for Invitation entity."""

from uuid import UUID

from sqlmodel import select

from src.taskhub.models import Invitation, InvitationStatus
from src.taskhub.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    model = Invitation

    async def find_by_id_including_soft_deleted(self, invitation_id: UUID) -> Invitation | None:
        """Resource lookup used to resolve an invitation's owning organization.

        Invitations are never soft-deleted, so this is a plain primary key lookup.
        """
        return await self.get_by_id(invitation_id)

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        result = await self.session.execute(
            select(Invitation).where(Invitation.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def get_pending_for_email(self, email: str, organization_id: UUID) -> Invitation | None:
        result = await self.session.execute(
            select(Invitation).where(
                Invitation.email == email.lower(),
                Invitation.organization_id == organization_id,
                Invitation.status == InvitationStatus.PENDING.value,
            )
        )
        return result.scalars().first()

    async def list_for_organization(self, organization_id: UUID) -> list[Invitation]:
        result = await self.session.execute(
            select(Invitation)
            .where(Invitation.organization_id == organization_id)
            .order_by(Invitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())
