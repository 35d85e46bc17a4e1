"""Determine which organization a request targets."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from src.taskhub.core.authz import (
    FromRequest,
    FromResource,
    MissingOrganizationContext,
    NotAMember,
    OrgSource,
    RequestScope,
    ResourceNotFound,
)


class OrganizationOwned(Protocol):
    organization_id: UUID


class ResourceStore(Protocol):
    async def find_by_id_including_soft_deleted(
        self, resource_id: UUID
    ) -> OrganizationOwned | None: ...


@dataclass(frozen=True)
class OrgResolution:
    organization_id: UUID | None
    resource_id: UUID | None = None


def _as_uuid(value: Any) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


class OrganizationContextExtractor:
    """Resolves the single target organization for a request.

    * Resource-scoped routes look the resource up (soft-deleted rows included)
      and use its stored organization id. Anything the client sent is ignored.
    * Organization-scoped routes read the id the client supplied.
    * No source, or an absent optional id, means no organization check.
    """

    def __init__(self, resource_stores: Mapping[str, ResourceStore]):
        self.resource_stores = resource_stores

    async def extract(self, scope: RequestScope, source: OrgSource | None) -> OrgResolution:
        if source is None:
            return OrgResolution(organization_id=None)
        if isinstance(source, FromResource):
            return await self._from_resource(scope, source)
        return self._from_request(scope, source)

    async def _from_resource(self, scope: RequestScope, source: FromResource) -> OrgResolution:
        resource_id = _as_uuid(scope.path_params.get(source.param))
        if resource_id is None:
            raise ResourceNotFound(source.resource_type, f"malformed {source.param}")

        store = self.resource_stores[source.resource_type]
        resource = await store.find_by_id_including_soft_deleted(resource_id)
        if resource is None:
            raise ResourceNotFound(source.resource_type, f"{source.resource_type} does not exist")

        return OrgResolution(organization_id=resource.organization_id, resource_id=resource_id)

    def _from_request(self, scope: RequestScope, source: FromRequest) -> OrgResolution:
        raw = scope.lookup(source.location, source.name)
        if raw is None or raw == "":
            if source.optional:
                return OrgResolution(organization_id=None)
            raise MissingOrganizationContext(f"{source.name} missing from {source.location}")

        organization_id = _as_uuid(raw)
        if organization_id is None:
            # An id that cannot exist is reported exactly like a foreign one
            raise NotAMember(f"malformed {source.name}")
        return OrgResolution(organization_id=organization_id)
