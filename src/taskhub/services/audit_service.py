"""Audit logging service - records organization-scoped actions."""

import contextlib
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.core.audit_context import get_audit_context
from src.taskhub.core.logging import get_logger
from src.taskhub.models import AuditAction, AuditLog, AuditOutcome
from src.taskhub.repositories import AuditLogRepository

logger = get_logger(__name__)


def _value(item: AuditAction | AuditOutcome | str) -> str:
    return item.value if isinstance(item, (AuditAction, AuditOutcome)) else item


class AuditService:
    """Audit sink.

    Fire-and-forget design: recording failures are logged and never change the
    outcome of the request that produced them.
    """

    def __init__(self, audit_repo: AuditLogRepository, session: AsyncSession):
        self.audit_repo = audit_repo
        self.session = session

    async def record(
        self,
        action: AuditAction | str,
        resource_type: str,
        *,
        actor_id: UUID | None = None,
        organization_id: UUID | None = None,
        resource_id: UUID | None = None,
        outcome: AuditOutcome = AuditOutcome.SUCCESS,
        details: dict[str, Any] | None = None,
    ) -> AuditLog | None:
        """Record an audit entry.

        Request metadata (IP, user agent, request id) is read from the audit
        context, which also supplies the actor and organization when they are
        not passed. Returns the created AuditLog, or None if recording failed.
        """
        try:
            ctx = get_audit_context()
            if ctx is not None:
                actor_id = actor_id or ctx.actor_id
                organization_id = organization_id or ctx.organization_id
            audit_log = AuditLog(
                organization_id=organization_id,
                actor_id=actor_id,
                action=_value(action),
                resource_type=resource_type,
                resource_id=resource_id,
                outcome=_value(outcome),
                details=details,
                ip_address=ctx.ip_address if ctx else None,
                user_agent=ctx.user_agent if ctx else None,
                request_id=ctx.request_id if ctx else None,
            )

            self.audit_repo.add(audit_log)
            await self.session.commit()

            logger.debug(
                "Audit log recorded",
                action=audit_log.action,
                outcome=audit_log.outcome,
                resource_type=resource_type,
                resource_id=str(resource_id) if resource_id else None,
            )
            return audit_log

        except Exception as e:
            logger.warning(
                "Failed to record audit log",
                action=_value(action),
                resource_type=resource_type,
                error=str(e),
            )
            # Isolated session: rolling back here cannot touch business data
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None

    async def list_for_organization(
        self, organization_id: UUID, page: int = 1, limit: int = 10
    ) -> tuple[list[AuditLog], int]:
        return await self.audit_repo.list_for_organization(organization_id, page, limit)
