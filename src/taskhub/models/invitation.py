"""Invitation model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.taskhub.models.base import utc_now
from src.taskhub.models.enums import InvitationStatus, OrganizationRole


class Invitation(SQLModel, table=True):
    """Proposed role for a future member. Not a Membership until accepted.

    Only the SHA-256 of the token is stored; the plaintext leaves once.
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, index=True)
    token_hash: str = Field(max_length=64, unique=True, index=True)
    role: str = Field(default=OrganizationRole.VIEWER.value, max_length=20)
    status: str = Field(default=InvitationStatus.PENDING.value, max_length=20)
    organization_id: UUID = Field(foreign_key="organizations.id", index=True)
    invited_by_id: UUID = Field(foreign_key="users.id")
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    accepted_at: datetime | None = Field(default=None)

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or utc_now())
