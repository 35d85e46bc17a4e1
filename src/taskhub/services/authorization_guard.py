"""Authorization guard - the per-request allow/deny state machine.

Stages run strictly in order and the first failure is terminal:

1. authenticate     -> Unauthenticated (401)
2. resolve org      -> ResourceNotFound (404) / MissingOrganizationContext (400)
3. resolve member   -> NotAMember (403, or 404 on concealed routes)
4. check role       -> InsufficientRole (403)
5. admit            -> OrgContext for the handler

Every store call is bounded by a timeout. Store failures and timeouts become
AuthorizationUnavailable (503); they are never treated as an allow.
"""

import asyncio
from collections.abc import Awaitable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.taskhub.core.audit_context import bind_audit_subject
from src.taskhub.core.authz import (
    AuthorizationDecision,
    AuthorizationError,
    AuthorizationUnavailable,
    InsufficientRole,
    NotAMember,
    OrgContext,
    RequestScope,
    ResourceNotFound,
    RoutePolicy,
    UserIdentity,
)
from src.taskhub.core.logging import bind_user_context, get_logger
from src.taskhub.models import AuditOutcome, OrganizationRole
from src.taskhub.services.audit_service import AuditService
from src.taskhub.services.identity_provider import TokenIdentityProvider
from src.taskhub.services.membership_resolver import MembershipResolver
from src.taskhub.services.org_context import OrganizationContextExtractor

logger = get_logger(__name__)


class AuthorizationGuard:
    def __init__(
        self,
        identity_provider: TokenIdentityProvider,
        context_extractor: OrganizationContextExtractor,
        membership_resolver: MembershipResolver,
        audit_service: AuditService | None = None,
        lookup_timeout: float = 5.0,
    ):
        self.identity_provider = identity_provider
        self.context_extractor = context_extractor
        self.membership_resolver = membership_resolver
        self.audit_service = audit_service
        self.lookup_timeout = lookup_timeout

    async def authorize(
        self,
        authorization: str | None,
        scope: RequestScope,
        policy: RoutePolicy,
    ) -> OrgContext:
        """Run the pipeline for one request and return the admitted context."""
        identity = await self._bounded("identity", self.identity_provider.verify(authorization))
        bind_user_context(identity.user_id, email=identity.email)
        bind_audit_subject(identity.user_id)

        if policy.requirement is None and policy.source is None:
            return OrgContext(caller_id=identity.user_id)

        try:
            resolution = await self._bounded(
                "resource", self.context_extractor.extract(scope, policy.source)
            )
        except NotAMember as e:
            self._log_denial(identity, None, None, policy, e)
            raise self._concealed(policy, e) from e
        except AuthorizationError as e:
            self._log_denial(identity, None, None, policy, e)
            raise

        organization_id = resolution.organization_id
        if organization_id is None:
            return OrgContext(caller_id=identity.user_id)

        try:
            role = await self._bounded(
                "membership", self.membership_resolver.resolve(identity.user_id, organization_id)
            )
        except AuthorizationUnavailable as e:
            await self._record(
                identity,
                organization_id,
                policy,
                resolution.resource_id,
                AuditOutcome.FAILURE,
                {"error": type(e).__name__, "stage": "membership"},
            )
            raise
        if role is None:
            error = NotAMember(f"no membership in organization {organization_id}")
            await self._deny(identity, organization_id, None, policy, resolution.resource_id, error)
            raise self._concealed(policy, error)

        if policy.requirement is not None and not policy.requirement.is_satisfied_by(role):
            error = InsufficientRole(
                f"role {role.value} does not satisfy {policy.requirement.describe()}"
            )
            await self._deny(identity, organization_id, role, policy, resolution.resource_id, error)
            raise error

        decision = AuthorizationDecision(
            allowed=True,
            resolved_organization_id=organization_id,
            caller_role=role,
            requirement=policy.requirement,
        )
        logger.debug("authorization_granted", **decision.as_log_fields())
        bind_user_context(identity.user_id, organization_id)
        bind_audit_subject(identity.user_id, organization_id)

        return OrgContext(
            caller_id=identity.user_id,
            organization_id=organization_id,
            caller_role=role,
            resource_id=resolution.resource_id,
        )

    async def _bounded[T](self, stage: str, awaitable: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self.lookup_timeout):
                return await awaitable
        except TimeoutError as e:
            logger.error("Authorization lookup timed out", stage=stage)
            raise AuthorizationUnavailable(f"{stage} lookup timed out") from e
        except SQLAlchemyError as e:
            logger.error("Authorization lookup failed", stage=stage, error=str(e))
            raise AuthorizationUnavailable(f"{stage} lookup failed") from e

    @staticmethod
    def _concealed(policy: RoutePolicy, error: NotAMember) -> AuthorizationError:
        if policy.conceal_membership:
            return ResourceNotFound("organization", error.reason)
        return error

    def _log_denial(
        self,
        identity: UserIdentity,
        organization_id: UUID | None,
        role: OrganizationRole | None,
        policy: RoutePolicy,
        error: AuthorizationError,
    ) -> None:
        decision = AuthorizationDecision(
            allowed=False,
            resolved_organization_id=organization_id,
            caller_role=role,
            requirement=policy.requirement,
            reason=error.reason,
        )
        logger.info(
            "authorization_denied",
            caller_id=str(identity.user_id),
            error=type(error).__name__,
            **decision.as_log_fields(),
        )

    async def _deny(
        self,
        identity: UserIdentity,
        organization_id: UUID,
        role: OrganizationRole | None,
        policy: RoutePolicy,
        resource_id: UUID | None,
        error: AuthorizationError,
    ) -> None:
        self._log_denial(identity, organization_id, role, policy, error)
        await self._record(
            identity,
            organization_id,
            policy,
            resource_id,
            AuditOutcome.DENIED,
            {"error": type(error).__name__},
        )

    async def _record(
        self,
        identity: UserIdentity,
        organization_id: UUID,
        policy: RoutePolicy,
        resource_id: UUID | None,
        outcome: AuditOutcome,
        details: dict[str, str],
    ) -> None:
        if self.audit_service is None or policy.audit_action is None:
            return
        await self.audit_service.record(
            policy.audit_action,
            policy.resource_type or "organization",
            actor_id=identity.user_id,
            organization_id=organization_id,
            resource_id=resource_id,
            outcome=outcome,
            details=details,
        )
