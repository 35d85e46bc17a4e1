"""Organization and membership models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.taskhub.models.base import utc_now
from src.taskhub.models.enums import OrganizationRole


class Organization(SQLModel, table=True):
    """Tenant boundary. Every task, invitation and audit entry belongs to one."""

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)
    parent_id: UUID | None = Field(default=None, foreign_key="organizations.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Membership(SQLModel, table=True):
    """(user, organization, role) - at most one row per user and organization.

    The composite primary key is what makes a duplicate membership impossible.
    """

    __tablename__ = "memberships"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    organization_id: UUID = Field(foreign_key="organizations.id", primary_key=True)
    role: str = Field(default=OrganizationRole.VIEWER.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
