"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.taskhub.api.dependencies.db import DBSession
from src.taskhub.repositories import (
    InvitationRepository,
    MembershipRepository,
    OrganizationRepository,
    TaskRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_organization_repository(session: DBSession) -> OrganizationRepository:
    return OrganizationRepository(session)


def get_membership_repository(session: DBSession) -> MembershipRepository:
    return MembershipRepository(session)


def get_task_repository(session: DBSession) -> TaskRepository:
    return TaskRepository(session)


def get_invitation_repository(session: DBSession) -> InvitationRepository:
    return InvitationRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
OrganizationRepo = Annotated[OrganizationRepository, Depends(get_organization_repository)]
MembershipRepo = Annotated[MembershipRepository, Depends(get_membership_repository)]
TaskRepo = Annotated[TaskRepository, Depends(get_task_repository)]
InvitationRepo = Annotated[InvitationRepository, Depends(get_invitation_repository)]
