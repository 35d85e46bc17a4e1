"""Tests for organization context extraction."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.taskhub.core.authz import (
    MissingOrganizationContext,
    NotAMember,
    RequestScope,
    ResourceNotFound,
    from_body,
    from_path,
    from_query,
    from_resource,
)
from src.taskhub.services.org_context import OrganizationContextExtractor, OrgResolution

pytestmark = pytest.mark.unit


@pytest.fixture
def invitation_store() -> MagicMock:
    store = MagicMock()
    store.find_by_id_including_soft_deleted = AsyncMock(return_value=None)
    return store


@pytest.fixture
def extractor(invitation_store) -> OrganizationContextExtractor:
    return OrganizationContextExtractor({"invitation": invitation_store})


class TestFromRequest:
    @pytest.mark.parametrize(
        ("source", "scope_kwarg"),
        [
            (from_path("organization_id"), "path_params"),
            (from_query("organization_id"), "query_params"),
            (from_body("organization_id"), "body"),
        ],
    )
    async def test_reads_each_location(self, extractor, organization_id, source, scope_kwarg):
        scope = RequestScope(**{scope_kwarg: {"organization_id": str(organization_id)}})

        resolution = await extractor.extract(scope, source)

        assert resolution == OrgResolution(organization_id=organization_id)

    async def test_only_the_declared_location_is_read(self, extractor, organization_id):
        scope = RequestScope(query_params={"organization_id": str(organization_id)})
        with pytest.raises(MissingOrganizationContext):
            await extractor.extract(scope, from_body("organization_id"))

    async def test_empty_string_is_missing(self, extractor):
        scope = RequestScope(query_params={"organization_id": ""})
        with pytest.raises(MissingOrganizationContext):
            await extractor.extract(scope, from_query("organization_id"))

    async def test_optional_absent_resolves_to_none(self, extractor):
        resolution = await extractor.extract(RequestScope(), from_body("parent_id", optional=True))
        assert resolution.organization_id is None

    async def test_non_uuid_is_treated_as_foreign(self, extractor):
        scope = RequestScope(body={"organization_id": 12})
        with pytest.raises(NotAMember):
            await extractor.extract(scope, from_body("organization_id"))

    async def test_no_source_means_no_organization(self, extractor):
        resolution = await extractor.extract(RequestScope(), None)
        assert resolution.organization_id is None


class TestFromResource:
    async def test_uses_stored_organization(self, extractor, invitation_store, organization_id):
        invitation_id = uuid4()
        invitation_store.find_by_id_including_soft_deleted.return_value = SimpleNamespace(
            organization_id=organization_id
        )
        scope = RequestScope(path_params={"invitation_id": str(invitation_id)})

        resolution = await extractor.extract(scope, from_resource("invitation", "invitation_id"))

        assert resolution == OrgResolution(organization_id, invitation_id)
        invitation_store.find_by_id_including_soft_deleted.assert_awaited_once_with(invitation_id)

    async def test_unknown_resource_is_not_found(self, extractor):
        scope = RequestScope(path_params={"invitation_id": str(uuid4())})
        with pytest.raises(ResourceNotFound) as exc_info:
            await extractor.extract(scope, from_resource("invitation", "invitation_id"))
        assert exc_info.value.detail == "Invitation not found"

    async def test_malformed_id_is_not_found_without_lookup(self, extractor, invitation_store):
        scope = RequestScope(path_params={"invitation_id": "abc"})
        with pytest.raises(ResourceNotFound):
            await extractor.extract(scope, from_resource("invitation", "invitation_id"))
        invitation_store.find_by_id_including_soft_deleted.assert_not_called()


class TestRequestScope:
    def test_scope_is_read_only(self):
        scope = RequestScope(body={"organization_id": "x"})
        with pytest.raises(TypeError):
            scope.body["organization_id"] = "y"  # type: ignore[index]

    def test_scope_copies_its_inputs(self):
        body = {"organization_id": "x"}
        scope = RequestScope(body=body)
        body["organization_id"] = "y"
        assert scope.lookup("body", "organization_id") == "x"
