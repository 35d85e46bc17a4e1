from src.taskhub.services.audit_service import AuditService
from src.taskhub.services.auth_service import AuthService
from src.taskhub.services.authorization_guard import AuthorizationGuard
from src.taskhub.services.identity_provider import TokenIdentityProvider
from src.taskhub.services.invitation_service import InvitationService
from src.taskhub.services.membership_resolver import MembershipResolver
from src.taskhub.services.org_context import OrganizationContextExtractor
from src.taskhub.services.organization_service import OrganizationService
from src.taskhub.services.task_service import TaskService

__all__ = [
    "AuditService",
    "AuthService",
    "AuthorizationGuard",
    "InvitationService",
    "MembershipResolver",
    "OrganizationContextExtractor",
    "OrganizationService",
    "TaskService",
    "TokenIdentityProvider",
]
