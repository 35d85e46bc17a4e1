"""Invitation endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.taskhub.api.dependencies import AuditServiceDep, InvitationServiceDep, authorized
from src.taskhub.core.authz import (
    MANAGE_INVITATIONS,
    OrgContext,
    RoleGrantDenied,
    RoutePolicy,
    from_body,
    from_path,
    from_resource,
)
from src.taskhub.models import AuditAction, AuditOutcome, Invitation, OrganizationRole
from src.taskhub.schemas.auth import UserRead
from src.taskhub.schemas.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    InvitationCreate,
    InvitationCreateResponse,
    InvitationInfoResponse,
    InvitationRead,
)
from src.taskhub.services.audit_service import AuditService
from src.taskhub.services.invitation_service import (
    InvalidCredentialsError,
    InvitationConflictError,
    InvitationNotFoundError,
    InvitationStateError,
)

router = APIRouter(prefix="/invitations", tags=["invitations"])

INVITATION_RESOURCE = from_resource("invitation", "invitation_id")

CREATE_INVITATION = RoutePolicy(
    requirement=MANAGE_INVITATIONS,
    source=from_body("organization_id"),
    audit_action=AuditAction.INVITATION_CREATE,
    resource_type="invitation",
)
LIST_INVITATIONS = RoutePolicy(requirement=MANAGE_INVITATIONS, source=from_path("organization_id"))
REVOKE_INVITATION = RoutePolicy(
    requirement=MANAGE_INVITATIONS,
    source=INVITATION_RESOURCE,
    audit_action=AuditAction.INVITATION_REVOKE,
    resource_type="invitation",
)
RESEND_INVITATION = RoutePolicy(
    requirement=MANAGE_INVITATIONS,
    source=INVITATION_RESOURCE,
    audit_action=AuditAction.INVITATION_RESEND,
    resource_type="invitation",
)

InvitationCreator = authorized(CREATE_INVITATION)
InvitationManager = authorized(LIST_INVITATIONS)
InvitationRevoker = authorized(REVOKE_INVITATION)
InvitationResender = authorized(RESEND_INVITATION)


def _to_http(e: ValueError) -> HTTPException:
    if isinstance(e, InvitationNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, InvitationConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, InvalidCredentialsError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(e))


async def _record_grant_denied(
    audit_service: AuditService,
    action: AuditAction,
    context: OrgContext,
    requested_role: OrganizationRole,
    resource_id: UUID | None = None,
) -> None:
    await audit_service.record(
        action,
        "invitation",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=resource_id,
        outcome=AuditOutcome.DENIED,
        details={"error": RoleGrantDenied.__name__, "requested_role": requested_role.value},
    )


def _created_response(invitation: Invitation, token: str) -> InvitationCreateResponse:
    return InvitationCreateResponse(
        **InvitationRead.model_validate(invitation).model_dump(),
        token=token,
    )


@router.post(
    "",
    response_model=InvitationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invitation",
    description=(
        "OWNER or ADMIN of the organization. ADMINs may not grant OWNER. "
        "The plaintext token is returned once."
    ),
    responses={
        403: {"description": "Not permitted to invite, or to grant this role"},
        409: {"description": "Already a member, or an invitation is pending"},
    },
)
async def create_invitation(
    request: InvitationCreate,
    context: InvitationCreator,
    invitation_service: InvitationServiceDep,
    audit_service: AuditServiceDep,
) -> InvitationCreateResponse:
    try:
        invitation, token = await invitation_service.create(
            email=request.email,
            role=request.role,
            organization_id=context.organization_id,
            inviter_id=context.caller_id,
            inviter_role=context.caller_role,
        )
    except RoleGrantDenied:
        await _record_grant_denied(
            audit_service, AuditAction.INVITATION_CREATE, context, request.role
        )
        raise
    except ValueError as e:
        raise _to_http(e) from e

    await audit_service.record(
        AuditAction.INVITATION_CREATE,
        "invitation",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=invitation.id,
        details={"role": invitation.role},
    )
    return _created_response(invitation, token)


@router.get(
    "/organization/{organization_id}",
    response_model=list[InvitationRead],
    summary="List invitations",
    description="All invitations of an organization, newest first. OWNER or ADMIN.",
)
async def list_invitations(
    organization_id: UUID,
    context: InvitationManager,
    invitation_service: InvitationServiceDep,
) -> list[InvitationRead]:
    invitations = await invitation_service.list_for_organization(context.organization_id)
    return [InvitationRead.model_validate(invitation) for invitation in invitations]


@router.get(
    "/token/{token}",
    response_model=InvitationInfoResponse,
    summary="Get invitation info by token",
    description="Public information about an invitation, for the accept page.",
    responses={404: {"description": "Invitation not found"}},
)
async def get_invitation_info(
    token: str,
    invitation_service: InvitationServiceDep,
) -> InvitationInfoResponse:
    info = await invitation_service.get_info(token)
    if info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invitation not found")

    invitation, organization = info
    return InvitationInfoResponse(
        email=invitation.email,
        organization_name=organization.name,
        role=invitation.role,
        status=invitation.status,
        expires_at=invitation.expires_at,
    )


@router.post(
    "/accept",
    response_model=AcceptInvitationResponse,
    summary="Accept invitation",
    description=(
        "Join the organization. Unknown emails get a new account; existing "
        "users must supply their password."
    ),
    responses={
        400: {"description": "Invitation is not pending, or has expired"},
        401: {"description": "Wrong password for an existing account"},
        404: {"description": "Invitation not found"},
    },
)
async def accept_invitation(
    request: AcceptInvitationRequest,
    invitation_service: InvitationServiceDep,
    audit_service: AuditServiceDep,
) -> AcceptInvitationResponse:
    try:
        invitation, user, membership, access_token = await invitation_service.accept(
            token=request.token,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except ValueError as e:
        raise _to_http(e) from e

    await audit_service.record(
        AuditAction.INVITATION_ACCEPT,
        "invitation",
        actor_id=user.id,
        organization_id=invitation.organization_id,
        resource_id=invitation.id,
        details={"role": membership.role},
    )
    return AcceptInvitationResponse(
        access_token=access_token,
        user=UserRead.model_validate(user),
        organization_id=invitation.organization_id,
        role=membership.role,
    )


@router.delete(
    "/{invitation_id}",
    response_model=InvitationRead,
    summary="Revoke invitation",
    description="Revoke a pending invitation. OWNER or ADMIN.",
    responses={
        400: {"description": "Invitation is not pending"},
        404: {"description": "Invitation not found"},
    },
)
async def revoke_invitation(
    invitation_id: UUID,
    context: InvitationRevoker,
    invitation_service: InvitationServiceDep,
    audit_service: AuditServiceDep,
) -> InvitationRead:
    try:
        invitation = await invitation_service.revoke(invitation_id, context.organization_id)
    except ValueError as e:
        raise _to_http(e) from e

    await audit_service.record(
        AuditAction.INVITATION_REVOKE,
        "invitation",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=invitation_id,
    )
    return InvitationRead.model_validate(invitation)


@router.post(
    "/{invitation_id}/resend",
    response_model=InvitationCreateResponse,
    summary="Resend invitation",
    description="Issue a new token and expiry; the old token stops working. OWNER or ADMIN.",
    responses={
        400: {"description": "Invitation was already accepted"},
        403: {"description": "Not permitted to grant the invitation's role"},
        404: {"description": "Invitation not found"},
    },
)
async def resend_invitation(
    invitation_id: UUID,
    context: InvitationResender,
    invitation_service: InvitationServiceDep,
    audit_service: AuditServiceDep,
) -> InvitationCreateResponse:
    try:
        invitation, token = await invitation_service.resend(
            invitation_id,
            context.organization_id,
            resender_role=context.caller_role,
        )
    except RoleGrantDenied:
        # Only reachable by ADMINs resending an OWNER invitation
        await _record_grant_denied(
            audit_service,
            AuditAction.INVITATION_RESEND,
            context,
            OrganizationRole.OWNER,
            resource_id=invitation_id,
        )
        raise
    except ValueError as e:
        raise _to_http(e) from e

    await audit_service.record(
        AuditAction.INVITATION_RESEND,
        "invitation",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=invitation_id,
    )
    return _created_response(invitation, token)
