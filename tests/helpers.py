"""Test helper functions for common data creation patterns."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.core.security import create_access_token
from src.taskhub.models import Membership, Organization, OrganizationRole, Task, User
from tests.factories import MembershipFactory, OrganizationFactory, TaskFactory, UserFactory


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for ``user``, minted directly instead of logging in."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


async def create_user(session: AsyncSession, **user_kwargs) -> User:
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.flush()
    return user


async def create_organization(session: AsyncSession, **org_kwargs) -> Organization:
    organization = OrganizationFactory.build(**org_kwargs)
    session.add(organization)
    await session.flush()
    return organization


async def create_user_with_membership(
    session: AsyncSession,
    organization: Organization,
    role: OrganizationRole = OrganizationRole.VIEWER,
    **user_kwargs,
) -> tuple[User, Membership]:
    """Create a user and their membership in an organization.

    Args:
        session: Database session
        organization: Organization to create membership in
        role: Role for the membership (default: VIEWER)
        **user_kwargs: Additional args passed to UserFactory

    Returns:
        Tuple of (user, membership)
    """
    user = await create_user(session, **user_kwargs)

    membership = MembershipFactory.build(
        user_id=user.id,
        organization_id=organization.id,
        role=role.value,
    )
    session.add(membership)
    await session.flush()

    return user, membership


async def create_task(
    session: AsyncSession,
    organization: Organization,
    creator: User | None = None,
    **task_kwargs,
) -> Task:
    creator_id = creator.id if creator else None
    task = TaskFactory.build(
        organization_id=organization.id,
        created_by_id=creator_id,
        assignee_id=creator_id,
        **task_kwargs,
    )
    session.add(task)
    await session.flush()
    return task
