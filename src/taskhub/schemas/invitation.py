"""Invitation schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.taskhub.models.enums import InvitationStatus, OrganizationRole
from src.taskhub.schemas.auth import TokenResponse


class InvitationCreate(BaseModel):
    email: EmailStr
    organization_id: UUID
    role: OrganizationRole = OrganizationRole.VIEWER


class InvitationRead(BaseModel):
    id: UUID
    email: str
    role: OrganizationRole
    status: InvitationStatus
    organization_id: UUID
    invited_by_id: UUID
    expires_at: datetime
    created_at: datetime
    accepted_at: datetime | None

    model_config = {"from_attributes": True}


class InvitationCreateResponse(InvitationRead):
    """Returned once on create/resend. Delivering the token is the caller's job."""

    token: str


class InvitationInfoResponse(BaseModel):
    """Public info about an invitation (for the accept page)."""

    email: str
    organization_name: str
    role: OrganizationRole
    status: InvitationStatus
    expires_at: datetime


class AcceptInvitationRequest(BaseModel):
    token: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=8, max_length=100)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("token")
    @classmethod
    def strip_token(cls, v: str) -> str:
        return v.strip()


class AcceptInvitationResponse(TokenResponse):
    organization_id: UUID
    role: OrganizationRole
