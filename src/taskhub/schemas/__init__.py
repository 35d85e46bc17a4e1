from src.taskhub.schemas.audit import AuditLogRead
from src.taskhub.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
)
from src.taskhub.schemas.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    InvitationCreate,
    InvitationCreateResponse,
    InvitationInfoResponse,
    InvitationRead,
)
from src.taskhub.schemas.organization import (
    MemberRead,
    MyOrganizationRead,
    OrganizationCreate,
    OrganizationDetail,
    OrganizationRead,
    OrganizationSummary,
    OrganizationUpdate,
)
from src.taskhub.schemas.pagination import PageResponse
from src.taskhub.schemas.task import TaskCreate, TaskRead, TaskUpdate

__all__ = [
    # Audit
    "AuditLogRead",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserRead",
    # Invitations
    "AcceptInvitationRequest",
    "AcceptInvitationResponse",
    "InvitationCreate",
    "InvitationCreateResponse",
    "InvitationInfoResponse",
    "InvitationRead",
    # Organizations
    "MemberRead",
    "MyOrganizationRead",
    "OrganizationCreate",
    "OrganizationDetail",
    "OrganizationRead",
    "OrganizationSummary",
    "OrganizationUpdate",
    # Pagination
    "PageResponse",
    # Tasks
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
]
