"""Organization endpoints.

Detail routes conceal membership: a caller outside the organization gets the
same 404 as for an organization that does not exist.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.taskhub.api.dependencies import (
    AuditServiceDep,
    Authenticated,
    OrganizationServiceDep,
    authorized,
)
from src.taskhub.core.authz import (
    ExactSet,
    Minimum,
    RoutePolicy,
    from_body,
    from_path,
)
from src.taskhub.models import AuditAction, Organization, OrganizationRole
from src.taskhub.schemas.organization import (
    MemberRead,
    MyOrganizationRead,
    OrganizationCreate,
    OrganizationDetail,
    OrganizationRead,
    OrganizationSummary,
    OrganizationUpdate,
)
from src.taskhub.services.organization_service import OrganizationHasChildrenError

router = APIRouter(prefix="/organizations", tags=["organizations"])

CREATE_ORGANIZATION = RoutePolicy(
    requirement=ExactSet.of(OrganizationRole.OWNER, OrganizationRole.ADMIN),
    # Only sub-organizations need a check, against the parent
    source=from_body("parent_id", optional=True),
    audit_action=AuditAction.ORGANIZATION_CREATE,
    resource_type="organization",
)
VIEW_ORGANIZATION = RoutePolicy(
    requirement=Minimum(OrganizationRole.VIEWER),
    source=from_path("organization_id"),
    conceal_membership=True,
)
UPDATE_ORGANIZATION = RoutePolicy(
    requirement=ExactSet.of(OrganizationRole.OWNER, OrganizationRole.ADMIN),
    source=from_path("organization_id"),
    conceal_membership=True,
    audit_action=AuditAction.ORGANIZATION_UPDATE,
    resource_type="organization",
)
DELETE_ORGANIZATION = RoutePolicy(
    requirement=Minimum(OrganizationRole.OWNER),
    source=from_path("organization_id"),
    conceal_membership=True,
    audit_action=AuditAction.ORGANIZATION_DELETE,
    resource_type="organization",
)

OrganizationCreator = authorized(CREATE_ORGANIZATION)
OrganizationViewer = authorized(VIEW_ORGANIZATION)
OrganizationEditor = authorized(UPDATE_ORGANIZATION)
OrganizationOwner = authorized(DELETE_ORGANIZATION)


async def _get_or_404(organization_service: OrganizationServiceDep, organization_id: UUID) -> Organization:
    organization = await organization_service.get(organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organization not found",
        )
    return organization


@router.post(
    "",
    response_model=OrganizationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create organization",
    description=(
        "Create an organization owned by the caller. With parent_id, the caller "
        "must be OWNER or ADMIN of the parent."
    ),
    responses={
        201: {"description": "Organization created"},
        403: {"description": "Not permitted on the parent organization"},
    },
)
async def create_organization(
    request: OrganizationCreate,
    context: OrganizationCreator,
    organization_service: OrganizationServiceDep,
    audit_service: AuditServiceDep,
) -> OrganizationRead:
    organization = await organization_service.create(
        name=request.name,
        creator_id=context.caller_id,
        parent_id=context.organization_id,
    )
    await audit_service.record(
        AuditAction.ORGANIZATION_CREATE,
        "organization",
        actor_id=context.caller_id,
        organization_id=organization.id,
        resource_id=organization.id,
        details={"parent_id": str(organization.parent_id) if organization.parent_id else None},
    )
    return OrganizationRead.model_validate(organization)


@router.get(
    "",
    response_model=list[MyOrganizationRead],
    summary="List my organizations",
    description="Organizations the caller belongs to, with the caller's role in each.",
)
async def list_my_organizations(
    context: Authenticated,
    organization_service: OrganizationServiceDep,
) -> list[MyOrganizationRead]:
    rows = await organization_service.list_for_user(context.caller_id)
    return [
        MyOrganizationRead(**OrganizationRead.model_validate(org).model_dump(), role=role)
        for org, role in rows
    ]


@router.get(
    "/{organization_id}",
    response_model=OrganizationDetail,
    summary="Get organization",
    responses={404: {"description": "Organization not found"}},
)
async def get_organization(
    organization_id: UUID,
    context: OrganizationViewer,
    organization_service: OrganizationServiceDep,
) -> OrganizationDetail:
    organization = await _get_or_404(organization_service, context.organization_id)
    children = await organization_service.list_children(organization.id)
    return OrganizationDetail(
        **OrganizationRead.model_validate(organization).model_dump(),
        children=[OrganizationSummary.model_validate(child) for child in children],
    )


@router.patch(
    "/{organization_id}",
    response_model=OrganizationRead,
    summary="Update organization",
    description="OWNER or ADMIN only.",
    responses={
        403: {"description": "Insufficient role"},
        404: {"description": "Organization not found"},
    },
)
async def update_organization(
    organization_id: UUID,
    request: OrganizationUpdate,
    context: OrganizationEditor,
    organization_service: OrganizationServiceDep,
    audit_service: AuditServiceDep,
) -> OrganizationRead:
    organization = await _get_or_404(organization_service, context.organization_id)
    organization = await organization_service.update(organization, name=request.name)
    await audit_service.record(
        AuditAction.ORGANIZATION_UPDATE,
        "organization",
        actor_id=context.caller_id,
        organization_id=organization.id,
        resource_id=organization.id,
        details={"changes": request.model_dump(exclude_unset=True)},
    )
    return OrganizationRead.model_validate(organization)


@router.delete(
    "/{organization_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete organization",
    description="OWNER only. Fails while sub-organizations exist.",
    responses={
        400: {"description": "Organization has sub-organizations"},
        403: {"description": "Insufficient role"},
        404: {"description": "Organization not found"},
    },
)
async def delete_organization(
    organization_id: UUID,
    context: OrganizationOwner,
    organization_service: OrganizationServiceDep,
    audit_service: AuditServiceDep,
) -> None:
    organization = await _get_or_404(organization_service, context.organization_id)
    try:
        await organization_service.delete(organization)
    except OrganizationHasChildrenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    await audit_service.record(
        AuditAction.ORGANIZATION_DELETE,
        "organization",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=context.organization_id,
    )


@router.get(
    "/{organization_id}/members",
    response_model=list[MemberRead],
    summary="List members",
    responses={404: {"description": "Organization not found"}},
)
async def list_members(
    organization_id: UUID,
    context: OrganizationViewer,
    organization_service: OrganizationServiceDep,
) -> list[MemberRead]:
    members = await organization_service.list_members(context.organization_id)
    return [
        MemberRead(
            user_id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=OrganizationRole(membership.role),
            joined_at=membership.created_at,
        )
        for membership, user in members
    ]
