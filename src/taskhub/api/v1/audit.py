"""Audit log endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.taskhub.api.dependencies import AuditServiceDep, authorized
from src.taskhub.core.authz import ExactSet, RoutePolicy, from_query
from src.taskhub.models import OrganizationRole
from src.taskhub.schemas.audit import AuditLogRead
from src.taskhub.schemas.pagination import PageResponse

router = APIRouter(prefix="/audit-log", tags=["audit"])

READ_AUDIT_LOG = RoutePolicy(
    requirement=ExactSet.of(OrganizationRole.OWNER, OrganizationRole.ADMIN),
    source=from_query("organization_id"),
)

AuditReader = authorized(READ_AUDIT_LOG)


@router.get(
    "",
    response_model=PageResponse[AuditLogRead],
    summary="List audit logs",
    description="Audit trail of one organization, newest first. OWNER or ADMIN.",
    responses={
        200: {"description": "Page of audit log entries"},
        403: {"description": "Insufficient permissions for this organization"},
    },
)
async def list_audit_logs(
    organization_id: Annotated[UUID, Query(description="Organization to read")],
    context: AuditReader,
    audit_service: AuditServiceDep,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items per page")] = 10,
) -> PageResponse[AuditLogRead]:
    logs, total = await audit_service.list_for_organization(
        context.organization_id, page=page, limit=limit
    )
    return PageResponse[AuditLogRead].build(
        data=[AuditLogRead.model_validate(log) for log in logs],
        total=total,
        page=page,
        limit=limit,
    )
