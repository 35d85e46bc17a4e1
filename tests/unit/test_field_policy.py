"""Tests for field-level update restrictions."""

import pytest

from src.taskhub.core.authz import TASK_UPDATE_POLICY, FieldLevelPolicy, FieldPolicyViolation
from src.taskhub.models import OrganizationRole, TaskStatus
from src.taskhub.schemas.task import TaskUpdate

pytestmark = pytest.mark.unit


class TestTaskUpdatePolicy:
    def test_viewer_may_change_status(self):
        TASK_UPDATE_POLICY.enforce(OrganizationRole.VIEWER, {"status": TaskStatus.DONE})

    def test_viewer_may_not_change_title(self):
        with pytest.raises(FieldPolicyViolation) as exc_info:
            TASK_UPDATE_POLICY.enforce(
                OrganizationRole.VIEWER, {"status": TaskStatus.DONE, "title": "x"}
            )
        assert exc_info.value.fields == frozenset({"title"})
        assert exc_info.value.status_code == 403

    @pytest.mark.parametrize("role", [OrganizationRole.OWNER, OrganizationRole.ADMIN])
    def test_unrestricted_roles(self, role):
        TASK_UPDATE_POLICY.enforce(
            role, {"title": "x", "description": "y", "priority": "HIGH", "assignee_id": None}
        )

    def test_organization_id_is_a_system_field(self):
        # Injected server side, never counted against the caller
        TASK_UPDATE_POLICY.enforce(
            OrganizationRole.VIEWER, {"status": TaskStatus.DONE, "organization_id": "x"}
        )

    def test_explicit_null_counts_as_submitted(self):
        assert TASK_UPDATE_POLICY.disallowed_fields(
            OrganizationRole.VIEWER, {"description": None}
        ) == frozenset({"description"})

    def test_empty_payload_is_allowed(self):
        TASK_UPDATE_POLICY.enforce(OrganizationRole.VIEWER, {})


class TestWithSchema:
    def test_unset_fields_are_not_submitted(self):
        payload = TaskUpdate(status=TaskStatus.IN_PROGRESS).model_dump(exclude_unset=True)
        assert TASK_UPDATE_POLICY.submitted_fields(payload) == frozenset({"status"})

    def test_client_organization_id_never_reaches_the_payload(self):
        update = TaskUpdate.model_validate(
            {"status": "DONE", "organization_id": "8c4f5d0e-3f76-4d8c-9b8f-2f7f7a4f2d11"}
        )
        assert "organization_id" not in update.model_dump(exclude_unset=True)


class TestCustomPolicy:
    def test_roles_without_entry_are_unrestricted(self):
        policy = FieldLevelPolicy(allowed_fields={OrganizationRole.ADMIN: frozenset({"name"})})
        assert policy.disallowed_fields(OrganizationRole.VIEWER, {"anything": 1}) == frozenset()
        assert policy.disallowed_fields(OrganizationRole.ADMIN, {"slug": 1}) == frozenset({"slug"})
