"""Task service - organization-scoped CRUD with soft delete.

Every method takes the organization id resolved by the guard and filters on
it, so a task id from another organization behaves like a missing task.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.core.logging import get_logger
from src.taskhub.models import Task
from src.taskhub.models.base import utc_now
from src.taskhub.repositories import MembershipRepository, TaskRepository
from src.taskhub.schemas.task import TaskCreate

logger = get_logger(__name__)


class TaskNotFoundError(ValueError):
    pass


class InvalidAssigneeError(ValueError):
    pass


class TaskService:
    def __init__(
        self,
        task_repo: TaskRepository,
        membership_repo: MembershipRepository,
        session: AsyncSession,
    ):
        self.task_repo = task_repo
        self.membership_repo = membership_repo
        self.session = session

    async def _ensure_assignable(self, assignee_id: UUID, organization_id: UUID) -> None:
        if not await self.membership_repo.is_member(assignee_id, organization_id):
            raise InvalidAssigneeError("Assignee must be a member of the organization")

    async def create(self, data: TaskCreate, organization_id: UUID, creator_id: UUID) -> Task:
        """Create a task. The assignee defaults to the creator."""
        assignee_id = data.assignee_id or creator_id
        if assignee_id != creator_id:
            await self._ensure_assignable(assignee_id, organization_id)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status.value,
            priority=data.priority.value,
            category=data.category.value,
            assignee_id=assignee_id,
            created_by_id=creator_id,
            organization_id=organization_id,
        )
        self.task_repo.add(task)
        await self.session.commit()
        await self.session.refresh(task)

        logger.info("Task created", task_id=str(task.id))
        return task

    async def list_active(self, organization_id: UUID) -> list[Task]:
        return await self.task_repo.list_active(organization_id)

    async def list_deleted(self, organization_id: UUID) -> list[Task]:
        return await self.task_repo.list_deleted(organization_id)

    async def get(self, task_id: UUID, organization_id: UUID) -> Task:
        task = await self.task_repo.get_active(task_id, organization_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    async def update(self, task_id: UUID, organization_id: UUID, changes: dict[str, Any]) -> Task:
        """Apply an already-authorized set of field changes."""
        task = await self.get(task_id, organization_id)

        assignee_id = changes.get("assignee_id")
        if assignee_id is not None:
            await self._ensure_assignable(assignee_id, organization_id)

        for field, value in changes.items():
            if field == "organization_id":
                continue
            # Enum members are stored by value
            setattr(task, field, getattr(value, "value", value))

        task.updated_at = utc_now()
        self.task_repo.add(task)
        await self.session.commit()
        await self.session.refresh(task)
        return task

    async def soft_delete(self, task_id: UUID, organization_id: UUID) -> Task:
        task = await self.get(task_id, organization_id)
        task.deleted_at = utc_now()
        self.task_repo.add(task)
        await self.session.commit()

        logger.info("Task deleted", task_id=str(task_id))
        return task

    async def restore(self, task_id: UUID, organization_id: UUID) -> Task:
        task = await self.task_repo.get_deleted(task_id, organization_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} is not deleted")

        task.deleted_at = None
        task.updated_at = utc_now()
        self.task_repo.add(task)
        await self.session.commit()
        await self.session.refresh(task)

        logger.info("Task restored", task_id=str(task_id))
        return task
