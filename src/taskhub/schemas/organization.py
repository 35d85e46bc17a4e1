"""Organization schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.taskhub.models.enums import OrganizationRole


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    parent_id: UUID | None = Field(
        default=None,
        description="Create as a sub-organization. Requires OWNER or ADMIN of the parent.",
    )


class OrganizationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)


class OrganizationRead(BaseModel):
    id: UUID
    name: str
    parent_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrganizationSummary(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class OrganizationDetail(OrganizationRead):
    """Organization with its direct sub-organizations."""

    children: list[OrganizationSummary] = []


class MyOrganizationRead(OrganizationRead):
    """Organization as seen by one member, including that member's role."""

    role: OrganizationRole


class MemberRead(BaseModel):
    user_id: UUID
    email: str
    first_name: str | None
    last_name: str | None
    role: OrganizationRole
    joined_at: datetime
