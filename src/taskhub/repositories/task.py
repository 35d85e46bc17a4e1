"""Repository for Task entity (organization-scoped, soft-deletable)."""

from uuid import UUID

from sqlmodel import select

from src.taskhub.models import Task
from src.taskhub.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    model = Task

    async def find_by_id_including_soft_deleted(self, task_id: UUID) -> Task | None:
        """Resource lookup used to resolve a task's owning organization."""
        return await self.get_by_id(task_id)

    async def get_active(self, task_id: UUID, organization_id: UUID) -> Task | None:
        result = await self.session.execute(
            select(Task).where(
                Task.id == task_id,
                Task.organization_id == organization_id,
                Task.deleted_at.is_(None),  # type: ignore[union-attr]
            )
        )
        return result.scalar_one_or_none()

    async def get_deleted(self, task_id: UUID, organization_id: UUID) -> Task | None:
        result = await self.session.execute(
            select(Task).where(
                Task.id == task_id,
                Task.organization_id == organization_id,
                Task.deleted_at.is_not(None),  # type: ignore[union-attr]
            )
        )
        return result.scalar_one_or_none()

    async def list_active(self, organization_id: UUID) -> list[Task]:
        """Active tasks, newest first."""
        result = await self.session.execute(
            select(Task)
            .where(
                Task.organization_id == organization_id,
                Task.deleted_at.is_(None),  # type: ignore[union-attr]
            )
            .order_by(Task.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def list_deleted(self, organization_id: UUID) -> list[Task]:
        """Soft-deleted tasks, most recently deleted first."""
        result = await self.session.execute(
            select(Task)
            .where(
                Task.organization_id == organization_id,
                Task.deleted_at.is_not(None),  # type: ignore[union-attr]
            )
            .order_by(Task.deleted_at.desc())  # type: ignore[union-attr]
        )
        return list(result.scalars().all())
