"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.api.dependencies.db import DBSession
from src.taskhub.api.dependencies.repositories import (
    InvitationRepo,
    MembershipRepo,
    OrganizationRepo,
    TaskRepo,
    UserRepo,
)
from src.taskhub.core.config import get_settings
from src.taskhub.core.db.engine import get_engine
from src.taskhub.repositories import AuditLogRepository
from src.taskhub.services import (
    AuditService,
    AuthorizationGuard,
    AuthService,
    InvitationService,
    MembershipResolver,
    OrganizationContextExtractor,
    OrganizationService,
    TaskService,
    TokenIdentityProvider,
)


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    return AuthService(user_repo, session)


def get_organization_service(
    organization_repo: OrganizationRepo,
    membership_repo: MembershipRepo,
    session: DBSession,
) -> OrganizationService:
    return OrganizationService(organization_repo, membership_repo, session)


def get_task_service(
    task_repo: TaskRepo,
    membership_repo: MembershipRepo,
    session: DBSession,
) -> TaskService:
    return TaskService(task_repo, membership_repo, session)


def get_invitation_service(
    invitation_repo: InvitationRepo,
    user_repo: UserRepo,
    membership_repo: MembershipRepo,
    organization_repo: OrganizationRepo,
    session: DBSession,
) -> InvitationService:
    return InvitationService(
        invitation_repo, user_repo, membership_repo, organization_repo, session
    )


async def get_audit_service() -> AsyncGenerator[AuditService]:
    """Get audit service with its own isolated session.

    Uses a dedicated session that commits independently from business transactions.
    This ensures audit logs are preserved even if the main transaction rolls back.
    """
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield AuditService(AuditLogRepository(session), session)


AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_authorization_guard(
    user_repo: UserRepo,
    membership_repo: MembershipRepo,
    task_repo: TaskRepo,
    invitation_repo: InvitationRepo,
    audit_service: AuditServiceDep,
) -> AuthorizationGuard:
    """Wire the guard to the request session.

    Resource-scoped routes name their store by key, e.g. ``from_resource("task", ...)``.
    """
    return AuthorizationGuard(
        identity_provider=TokenIdentityProvider(user_repo),
        context_extractor=OrganizationContextExtractor(
            {"task": task_repo, "invitation": invitation_repo}
        ),
        membership_resolver=MembershipResolver(membership_repo),
        audit_service=audit_service,
        lookup_timeout=get_settings().authz_lookup_timeout_seconds,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
OrganizationServiceDep = Annotated[OrganizationService, Depends(get_organization_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]
AuthorizationGuardDep = Annotated[AuthorizationGuard, Depends(get_authorization_guard)]
