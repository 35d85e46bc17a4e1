"""Unit tests for the AuthorizationGuard pipeline with mocked stores."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from src.taskhub.core.audit_context import get_audit_context, open_audit_context
from src.taskhub.core.authz import (
    AuthorizationUnavailable,
    ExactSet,
    InsufficientRole,
    MissingOrganizationContext,
    Minimum,
    NotAMember,
    OrgContext,
    RequestScope,
    ResourceNotFound,
    RoutePolicy,
    Unauthenticated,
    UserIdentity,
    from_body,
    from_path,
    from_resource,
)
from src.taskhub.models import AuditAction, AuditOutcome, OrganizationRole
from src.taskhub.services.authorization_guard import AuthorizationGuard
from src.taskhub.services.membership_resolver import MembershipResolver
from src.taskhub.services.org_context import OrganizationContextExtractor

pytestmark = pytest.mark.unit

AUTH_HEADER = "Bearer token"


@pytest.fixture
def identity(user_id) -> UserIdentity:
    return UserIdentity(user_id=user_id, email="caller@example.com")


@pytest.fixture
def identity_provider(identity) -> MagicMock:
    provider = MagicMock()
    provider.verify = AsyncMock(return_value=identity)
    return provider


@pytest.fixture
def membership_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_membership = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def task_store() -> MagicMock:
    store = MagicMock()
    store.find_by_id_including_soft_deleted = AsyncMock(return_value=None)
    return store


@pytest.fixture
def audit_service() -> MagicMock:
    service = MagicMock()
    service.record = AsyncMock(return_value=None)
    return service


@pytest.fixture
def guard(identity_provider, membership_repo, task_store, audit_service) -> AuthorizationGuard:
    return AuthorizationGuard(
        identity_provider=identity_provider,
        context_extractor=OrganizationContextExtractor({"task": task_store}),
        membership_resolver=MembershipResolver(membership_repo),
        audit_service=audit_service,
        lookup_timeout=0.5,
    )


def _member(membership_repo: MagicMock, role: OrganizationRole | str) -> None:
    value = role.value if isinstance(role, OrganizationRole) else role
    membership_repo.get_membership.return_value = SimpleNamespace(role=value)


def _org_scope(organization_id) -> RequestScope:
    return RequestScope(path_params={"organization_id": str(organization_id)})


VIEW_ORG = RoutePolicy(Minimum(OrganizationRole.VIEWER), from_path("organization_id"))
ADMIN_ORG = RoutePolicy(
    Minimum(OrganizationRole.ADMIN),
    from_path("organization_id"),
    audit_action=AuditAction.ORGANIZATION_UPDATE,
    resource_type="organization",
)


class TestAuthentication:
    async def test_unauthenticated_stops_before_any_lookup(
        self, guard, identity_provider, membership_repo, organization_id
    ):
        identity_provider.verify.side_effect = Unauthenticated("no header")

        with pytest.raises(Unauthenticated):
            await guard.authorize(None, _org_scope(organization_id), VIEW_ORG)

        membership_repo.get_membership.assert_not_called()

    async def test_authenticated_only_policy_skips_org_check(
        self, guard, membership_repo, user_id
    ):
        context = await guard.authorize(AUTH_HEADER, RequestScope(), RoutePolicy())

        assert context == OrgContext(caller_id=user_id)
        assert not context.is_organization_scoped
        membership_repo.get_membership.assert_not_called()


class TestAdmission:
    async def test_member_with_required_role_is_admitted(
        self, guard, membership_repo, user_id, organization_id
    ):
        _member(membership_repo, OrganizationRole.ADMIN)

        context = await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)

        assert context.caller_id == user_id
        assert context.organization_id == organization_id
        assert context.caller_role is OrganizationRole.ADMIN
        membership_repo.get_membership.assert_awaited_once_with(user_id, organization_id)

    async def test_higher_role_inherits(self, guard, membership_repo, organization_id):
        _member(membership_repo, OrganizationRole.OWNER)
        context = await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)
        assert context.caller_role is OrganizationRole.OWNER

    async def test_exact_set_rejects_role_outside_set(
        self, guard, membership_repo, organization_id
    ):
        _member(membership_repo, OrganizationRole.VIEWER)
        policy = RoutePolicy(
            ExactSet.of(OrganizationRole.OWNER, OrganizationRole.ADMIN),
            from_path("organization_id"),
        )
        with pytest.raises(InsufficientRole):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), policy)

    async def test_optional_body_source_absent_means_no_org_check(
        self, guard, membership_repo, user_id
    ):
        policy = RoutePolicy(
            ExactSet.of(OrganizationRole.OWNER, OrganizationRole.ADMIN),
            from_body("parent_id", optional=True),
        )
        context = await guard.authorize(AUTH_HEADER, RequestScope(body={"name": "x"}), policy)

        assert context == OrgContext(caller_id=user_id)
        membership_repo.get_membership.assert_not_called()


class TestDenial:
    async def test_non_member_is_forbidden(self, guard, organization_id):
        with pytest.raises(NotAMember) as exc_info:
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)
        assert exc_info.value.status_code == 403

    async def test_non_member_and_insufficient_role_share_public_detail(
        self, guard, membership_repo, organization_id
    ):
        with pytest.raises(NotAMember) as not_member:
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)

        _member(membership_repo, OrganizationRole.VIEWER)
        with pytest.raises(InsufficientRole) as insufficient:
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)

        assert not_member.value.detail == insufficient.value.detail
        assert not_member.value.status_code == insufficient.value.status_code

    async def test_concealed_route_reports_non_member_as_not_found(self, guard, organization_id):
        policy = RoutePolicy(
            Minimum(OrganizationRole.VIEWER),
            from_path("organization_id"),
            conceal_membership=True,
        )
        with pytest.raises(ResourceNotFound) as exc_info:
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), policy)
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Organization not found"

    async def test_concealed_route_still_reports_insufficient_role(
        self, guard, membership_repo, organization_id
    ):
        _member(membership_repo, OrganizationRole.VIEWER)
        policy = RoutePolicy(
            Minimum(OrganizationRole.OWNER),
            from_path("organization_id"),
            conceal_membership=True,
        )
        with pytest.raises(InsufficientRole):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), policy)

    async def test_missing_org_id_is_bad_request(self, guard):
        with pytest.raises(MissingOrganizationContext) as exc_info:
            await guard.authorize(AUTH_HEADER, RequestScope(), VIEW_ORG)
        assert exc_info.value.status_code == 400

    async def test_malformed_org_id_looks_like_foreign_org(self, guard, membership_repo):
        scope = RequestScope(path_params={"organization_id": "not-a-uuid"})
        with pytest.raises(NotAMember):
            await guard.authorize(AUTH_HEADER, scope, VIEW_ORG)
        membership_repo.get_membership.assert_not_called()

    async def test_unknown_stored_role_is_denied(self, guard, membership_repo, organization_id):
        _member(membership_repo, "SUPERUSER")
        with pytest.raises(NotAMember):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)


class TestResourceScoped:
    async def test_missing_resource_is_not_found_before_role_check(
        self, guard, membership_repo
    ):
        policy = RoutePolicy(Minimum(OrganizationRole.VIEWER), from_resource("task", "task_id"))
        scope = RequestScope(path_params={"task_id": str(uuid4())})

        with pytest.raises(ResourceNotFound) as exc_info:
            await guard.authorize(AUTH_HEADER, scope, policy)

        assert exc_info.value.detail == "Task not found"
        membership_repo.get_membership.assert_not_called()

    async def test_stored_organization_wins_over_body(
        self, guard, membership_repo, task_store, user_id
    ):
        task_id = uuid4()
        owning_org = uuid4()
        claimed_org = uuid4()
        task_store.find_by_id_including_soft_deleted.return_value = SimpleNamespace(
            organization_id=owning_org
        )
        _member(membership_repo, OrganizationRole.ADMIN)
        policy = RoutePolicy(Minimum(OrganizationRole.VIEWER), from_resource("task", "task_id"))
        scope = RequestScope(
            path_params={"task_id": str(task_id)},
            body={"organization_id": str(claimed_org)},
        )

        context = await guard.authorize(AUTH_HEADER, scope, policy)

        assert context.organization_id == owning_org
        assert context.resource_id == task_id
        membership_repo.get_membership.assert_awaited_once_with(user_id, owning_org)


class TestFailClosed:
    async def test_store_error_is_unavailable(self, guard, membership_repo, organization_id):
        membership_repo.get_membership.side_effect = OperationalError("SELECT", {}, Exception())

        with pytest.raises(AuthorizationUnavailable) as exc_info:
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)

        assert exc_info.value.status_code == 503

    async def test_store_timeout_is_unavailable(self, guard, membership_repo, organization_id):
        async def _hang(*args, **kwargs):
            await asyncio.sleep(10)

        membership_repo.get_membership.side_effect = _hang

        with pytest.raises(AuthorizationUnavailable, match="timed out"):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)

    async def test_resource_lookup_error_is_unavailable(self, guard, task_store):
        task_store.find_by_id_including_soft_deleted.side_effect = OperationalError(
            "SELECT", {}, Exception()
        )
        policy = RoutePolicy(Minimum(OrganizationRole.VIEWER), from_resource("task", "task_id"))
        scope = RequestScope(path_params={"task_id": str(uuid4())})

        with pytest.raises(AuthorizationUnavailable):
            await guard.authorize(AUTH_HEADER, scope, policy)


class TestDenialAudit:
    async def test_denied_mutation_is_audited(
        self, guard, membership_repo, audit_service, user_id, organization_id
    ):
        _member(membership_repo, OrganizationRole.VIEWER)

        with pytest.raises(InsufficientRole):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)

        audit_service.record.assert_awaited_once()
        args, kwargs = audit_service.record.call_args
        assert args == (AuditAction.ORGANIZATION_UPDATE, "organization")
        assert kwargs["actor_id"] == user_id
        assert kwargs["organization_id"] == organization_id
        assert kwargs["outcome"] is AuditOutcome.DENIED
        assert kwargs["details"] == {"error": "InsufficientRole"}

    async def test_reads_are_not_audited(self, guard, audit_service, organization_id):
        with pytest.raises(NotAMember):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)
        audit_service.record.assert_not_called()

    async def test_admission_is_not_audited(
        self, guard, membership_repo, audit_service, organization_id
    ):
        _member(membership_repo, OrganizationRole.ADMIN)
        await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)
        audit_service.record.assert_not_called()

    async def test_store_failure_on_mutation_is_audited_as_failure(
        self, guard, membership_repo, audit_service, user_id, organization_id
    ):
        membership_repo.get_membership.side_effect = OperationalError("SELECT", {}, Exception())

        with pytest.raises(AuthorizationUnavailable):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), ADMIN_ORG)

        _, kwargs = audit_service.record.call_args
        assert kwargs["actor_id"] == user_id
        assert kwargs["outcome"] is AuditOutcome.FAILURE
        assert kwargs["details"] == {"error": "AuthorizationUnavailable", "stage": "membership"}


class TestAuditSubject:
    async def test_admission_binds_caller_and_organization(
        self, guard, membership_repo, user_id, organization_id
    ):
        open_audit_context(request_id="req-1")
        _member(membership_repo, OrganizationRole.VIEWER)

        await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)

        ctx = get_audit_context()
        assert ctx.actor_id == user_id
        assert ctx.organization_id == organization_id
        assert ctx.request_id == "req-1"

    async def test_denial_binds_caller_only(self, guard, user_id, organization_id):
        open_audit_context()

        with pytest.raises(NotAMember):
            await guard.authorize(AUTH_HEADER, _org_scope(organization_id), VIEW_ORG)

        ctx = get_audit_context()
        assert ctx.actor_id == user_id
        assert ctx.organization_id is None
