"""Audit log model for organization-scoped actions."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel

from src.taskhub.models.base import utc_now


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    # Organization
    ORGANIZATION_CREATE = "organization.create"
    ORGANIZATION_UPDATE = "organization.update"
    ORGANIZATION_DELETE = "organization.delete"

    # Task
    TASK_CREATE = "task.create"
    TASK_UPDATE = "task.update"
    TASK_DELETE = "task.delete"
    TASK_RESTORE = "task.restore"

    # Invitation
    INVITATION_CREATE = "invitation.create"
    INVITATION_ACCEPT = "invitation.accept"
    INVITATION_REVOKE = "invitation.revoke"
    INVITATION_RESEND = "invitation.resend"


class AuditOutcome(str, Enum):
    SUCCESS = "success"
    DENIED = "denied"
    FAILURE = "failure"


class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_organization_created", "organization_id", "created_at"),
        Index("ix_audit_logs_resource", "resource_type", "resource_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # Context
    organization_id: UUID | None = Field(default=None, index=True)
    actor_id: UUID | None = Field(default=None, index=True)

    # Action details
    action: str = Field(max_length=50)  # AuditAction value
    resource_type: str = Field(max_length=50)  # "task", "organization", "invitation"
    resource_id: UUID | None = Field(default=None)
    outcome: str = Field(default=AuditOutcome.SUCCESS.value, max_length=20)
    details: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    # Request metadata
    ip_address: str | None = Field(max_length=45, default=None)
    user_agent: str | None = Field(max_length=500, default=None)
    request_id: str | None = Field(max_length=64, default=None)

    created_at: datetime = Field(default_factory=utc_now)
