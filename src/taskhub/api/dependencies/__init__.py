"""FastAPI dependency injection definitions.

Re-exports all dependencies.
"""

from src.taskhub.api.dependencies.auth import CurrentUser, get_current_user
from src.taskhub.api.dependencies.authz import (
    AUTHENTICATED_ONLY,
    Authenticated,
    authorized,
    build_request_scope,
    guard_route,
)
from src.taskhub.api.dependencies.db import DBSession, get_db_session
from src.taskhub.api.dependencies.repositories import (
    InvitationRepo,
    MembershipRepo,
    OrganizationRepo,
    TaskRepo,
    UserRepo,
    get_invitation_repository,
    get_membership_repository,
    get_organization_repository,
    get_task_repository,
    get_user_repository,
)
from src.taskhub.api.dependencies.services import (
    AuditServiceDep,
    AuthorizationGuardDep,
    AuthServiceDep,
    InvitationServiceDep,
    OrganizationServiceDep,
    TaskServiceDep,
    get_audit_service,
    get_auth_service,
    get_authorization_guard,
    get_invitation_service,
    get_organization_service,
    get_task_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Authorization
    "AUTHENTICATED_ONLY",
    "Authenticated",
    "authorized",
    "build_request_scope",
    "guard_route",
    # Auth
    "CurrentUser",
    "get_current_user",
    # Repositories
    "InvitationRepo",
    "MembershipRepo",
    "OrganizationRepo",
    "TaskRepo",
    "UserRepo",
    "get_invitation_repository",
    "get_membership_repository",
    "get_organization_repository",
    "get_task_repository",
    "get_user_repository",
    # Services
    "AuditServiceDep",
    "AuthServiceDep",
    "AuthorizationGuardDep",
    "InvitationServiceDep",
    "OrganizationServiceDep",
    "TaskServiceDep",
    "get_audit_service",
    "get_auth_service",
    "get_authorization_guard",
    "get_invitation_service",
    "get_organization_service",
    "get_task_service",
]
