"""Task schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.taskhub.models.enums import TaskCategory, TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    organization_id: UUID
    assignee_id: UUID | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL


class TaskUpdate(BaseModel):
    """Partial update. Only explicitly sent fields are applied.

    ``organization_id`` is accepted for client compatibility but ignored: the
    owning organization always comes from the stored task.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    assignee_id: UUID | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    organization_id: UUID | None = Field(default=None, exclude=True)

    @field_validator("title", "status", "priority", "category")
    @classmethod
    def reject_null(cls, v: object) -> object:
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class TaskRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory
    assignee_id: UUID | None
    created_by_id: UUID | None
    organization_id: UUID
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None

    model_config = {"from_attributes": True}
