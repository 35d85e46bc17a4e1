"""Organization service - creation, membership listing, update and delete."""

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.core.logging import get_logger
from src.taskhub.models import Invitation, Membership, Organization, OrganizationRole, Task, User
from src.taskhub.models.base import utc_now
from src.taskhub.repositories import MembershipRepository, OrganizationRepository

logger = get_logger(__name__)


class OrganizationHasChildrenError(ValueError):
    pass


class OrganizationService:
    def __init__(
        self,
        organization_repo: OrganizationRepository,
        membership_repo: MembershipRepository,
        session: AsyncSession,
    ):
        self.organization_repo = organization_repo
        self.membership_repo = membership_repo
        self.session = session

    async def create(self, name: str, creator_id: UUID, parent_id: UUID | None = None) -> Organization:
        """Create an organization with its creator as OWNER.

        The organization and the OWNER membership are committed together, so
        an organization never exists without an owner.
        """
        organization = Organization(name=name, parent_id=parent_id)
        try:
            self.organization_repo.add(organization)
            await self.session.flush()  # Get organization.id

            self.membership_repo.create_membership(
                user_id=creator_id,
                organization_id=organization.id,
                role=OrganizationRole.OWNER,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(organization)
        logger.info(
            "Organization created",
            organization_id=str(organization.id),
            parent_id=str(parent_id) if parent_id else None,
        )
        return organization

    async def list_for_user(self, user_id: UUID) -> list[tuple[Organization, OrganizationRole]]:
        rows = await self.organization_repo.list_for_user(user_id)
        return [(organization, OrganizationRole(role)) for organization, role in rows]

    async def get(self, organization_id: UUID) -> Organization | None:
        return await self.organization_repo.get_by_id(organization_id)

    async def list_children(self, organization_id: UUID) -> list[Organization]:
        return await self.organization_repo.list_children(organization_id)

    async def update(self, organization: Organization, name: str | None) -> Organization:
        if name is not None:
            organization.name = name
        organization.updated_at = utc_now()
        self.organization_repo.add(organization)
        await self.session.commit()
        await self.session.refresh(organization)
        return organization

    async def delete(self, organization: Organization) -> None:
        """Delete an organization and everything it owns.

        Raises OrganizationHasChildrenError while sub-organizations exist.
        Audit entries are kept.
        """
        if await self.organization_repo.has_children(organization.id):
            raise OrganizationHasChildrenError(
                "Cannot delete organization with sub-organizations. Delete them first."
            )

        organization_id = organization.id
        try:
            for model in (Task, Invitation, Membership):
                await self.session.execute(
                    delete(model).where(model.organization_id == organization_id)  # type: ignore[attr-defined]
                )
            await self.session.delete(organization)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Organization deleted", organization_id=str(organization_id))

    async def list_members(
        self, organization_id: UUID
    ) -> list[tuple[Membership, User]]:
        return await self.membership_repo.list_members(organization_id)
