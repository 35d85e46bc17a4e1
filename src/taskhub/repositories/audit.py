"""Repository for AuditLog entity."""

from uuid import UUID

from sqlmodel import select

from src.taskhub.models import AuditLog
from src.taskhub.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_for_organization(
        self,
        organization_id: UUID,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[AuditLog], int]:
        """List audit logs for an organization, newest first.

        Returns:
            Tuple of (logs, total)
        """
        query = select(AuditLog).where(AuditLog.organization_id == organization_id)
        return await self.paginate_page(
            query,
            page,
            limit,
            AuditLog.created_at.desc(),  # type: ignore[attr-defined]
        )
