"""Invitation service."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.core.authz import ensure_can_grant
from src.taskhub.core.config import get_settings
from src.taskhub.core.logging import get_logger
from src.taskhub.core.security import (
    create_access_token,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.taskhub.models import (
    Invitation,
    InvitationStatus,
    Membership,
    Organization,
    OrganizationRole,
    User,
)
from src.taskhub.models.base import utc_now
from src.taskhub.repositories import (
    InvitationRepository,
    MembershipRepository,
    OrganizationRepository,
    UserRepository,
)
from src.taskhub.schemas.auth import validate_password_strength

logger = get_logger(__name__)


class InvitationNotFoundError(ValueError):
    pass


class InvitationConflictError(ValueError):
    """Already a member, or an invitation is already pending."""


class InvitationStateError(ValueError):
    """Invitation is not in a state that allows the operation."""


class InvalidCredentialsError(ValueError):
    pass


class InvitationService:
    """Service for organization invitations."""

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        membership_repo: MembershipRepository,
        organization_repo: OrganizationRepository,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.membership_repo = membership_repo
        self.organization_repo = organization_repo
        self.session = session

    @staticmethod
    def _new_expiry():
        return utc_now() + timedelta(days=get_settings().invite_expire_days)

    async def _ensure_no_open_invitation(
        self, email: str, organization_id: UUID, exclude_id: UUID | None = None
    ) -> None:
        pending = await self.invitation_repo.get_pending_for_email(email, organization_id)
        if pending is None or pending.id == exclude_id:
            return
        if pending.is_expired():
            # Stale pending invitation; retire it so a fresh one can be issued
            pending.status = InvitationStatus.EXPIRED.value
            self.invitation_repo.add(pending)
            await self.session.flush()
            return
        raise InvitationConflictError("A pending invitation already exists for this email")

    async def create(
        self,
        email: str,
        role: OrganizationRole,
        organization_id: UUID,
        inviter_id: UUID,
        inviter_role: OrganizationRole,
    ) -> tuple[Invitation, str]:
        """Create an invitation. Returns (invitation, plaintext_token).

        Raises RoleGrantDenied when the inviter may not grant ``role``.
        """
        ensure_can_grant(inviter_role, role)
        email = email.lower().strip()

        try:
            organization = await self.organization_repo.get_by_id(organization_id)
            if organization is None:
                raise InvitationNotFoundError("Organization not found")

            existing_user = await self.user_repo.get_by_email(email)
            if existing_user and await self.membership_repo.is_member(
                existing_user.id, organization_id
            ):
                raise InvitationConflictError("User is already a member of this organization")

            await self._ensure_no_open_invitation(email, organization_id)

            token = generate_invitation_token()
            invitation = Invitation(
                email=email,
                token_hash=hash_token(token),
                role=role.value,
                organization_id=organization_id,
                invited_by_id=inviter_id,
                expires_at=self._new_expiry(),
            )
            self.invitation_repo.add(invitation)
            await self.session.commit()
            await self.session.refresh(invitation)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", error=str(e))
            raise

        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            organization_id=str(organization_id),
            role=role.value,
        )
        return invitation, token

    async def list_for_organization(self, organization_id: UUID) -> list[Invitation]:
        return await self.invitation_repo.list_for_organization(organization_id)

    async def get_info(self, token: str) -> tuple[Invitation, Organization] | None:
        """Public view of an invitation, looked up by its token."""
        invitation = await self.invitation_repo.get_by_token_hash(hash_token(token))
        if invitation is None:
            return None
        organization = await self.organization_repo.get_by_id(invitation.organization_id)
        if organization is None:
            return None
        return invitation, organization

    async def accept(
        self,
        token: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> tuple[Invitation, User, Membership, str]:
        """Accept an invitation. Returns (invitation, user, membership, access_token).

        Unknown emails get a new account. Existing users must prove the
        password. The membership role is copied from the invitation; an
        existing membership is left untouched and returned as is.
        """
        invitation = await self.invitation_repo.get_by_token_hash(hash_token(token))
        if invitation is None:
            raise InvitationNotFoundError("Invitation not found")

        if invitation.status != InvitationStatus.PENDING.value:
            raise InvitationStateError(
                f"Invitation has already been {invitation.status.lower()}"
            )

        if invitation.is_expired():
            invitation.status = InvitationStatus.EXPIRED.value
            self.invitation_repo.add(invitation)
            await self.session.commit()
            raise InvitationStateError("Invitation has expired")

        try:
            user = await self.user_repo.get_by_email(invitation.email)
            if user is None:
                validate_password_strength(password)
                user = User(
                    email=invitation.email,
                    hashed_password=hash_password(password),
                    first_name=first_name,
                    last_name=last_name,
                )
                self.user_repo.add(user)
                await self.session.flush()  # Get user.id
            elif not user.is_active or not verify_password(password, user.hashed_password):
                raise InvalidCredentialsError("Invalid credentials")

            membership = await self.membership_repo.get_membership(
                user.id, invitation.organization_id
            )
            if membership is None:
                membership = self.membership_repo.create_membership(
                    user_id=user.id,
                    organization_id=invitation.organization_id,
                    role=OrganizationRole(invitation.role),
                )

            invitation.status = InvitationStatus.ACCEPTED.value
            invitation.accepted_at = utc_now()
            self.invitation_repo.add(invitation)

            await self.session.commit()
            await self.session.refresh(invitation)
            await self.session.refresh(user)

        except ValueError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", error=str(e))
            raise

        logger.info(
            "Invitation accepted",
            invitation_id=str(invitation.id),
            user_id=str(user.id),
        )
        return invitation, user, membership, create_access_token(user.id, user.email)

    async def _get_in_organization(self, invitation_id: UUID, organization_id: UUID) -> Invitation:
        invitation = await self.invitation_repo.get_by_id(invitation_id)
        if invitation is None or invitation.organization_id != organization_id:
            raise InvitationNotFoundError("Invitation not found")
        return invitation

    async def revoke(self, invitation_id: UUID, organization_id: UUID) -> Invitation:
        invitation = await self._get_in_organization(invitation_id, organization_id)
        if invitation.status != InvitationStatus.PENDING.value:
            raise InvitationStateError("Only pending invitations can be revoked")

        invitation.status = InvitationStatus.REVOKED.value
        self.invitation_repo.add(invitation)
        await self.session.commit()
        await self.session.refresh(invitation)

        logger.info("Invitation revoked", invitation_id=str(invitation_id))
        return invitation

    async def resend(
        self,
        invitation_id: UUID,
        organization_id: UUID,
        resender_role: OrganizationRole,
    ) -> tuple[Invitation, str]:
        """Issue a fresh token and expiry. Returns (invitation, plaintext_token).

        The resender must be allowed to grant the invitation's role.
        """
        invitation = await self._get_in_organization(invitation_id, organization_id)
        ensure_can_grant(resender_role, OrganizationRole(invitation.role))

        if invitation.status == InvitationStatus.ACCEPTED.value:
            raise InvitationStateError("Invitation has already been accepted")

        try:
            await self._ensure_no_open_invitation(
                invitation.email, organization_id, exclude_id=invitation.id
            )

            token = generate_invitation_token()
            invitation.token_hash = hash_token(token)
            invitation.expires_at = self._new_expiry()
            invitation.status = InvitationStatus.PENDING.value
            self.invitation_repo.add(invitation)
            await self.session.commit()
            await self.session.refresh(invitation)
        except ValueError:
            await self.session.rollback()
            raise

        logger.info("Invitation resent", invitation_id=str(invitation_id))
        return invitation, token
