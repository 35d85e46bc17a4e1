"""Immutable values threaded through the authorization pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from uuid import UUID

from src.taskhub.core.authz.requirements import RoleRequirement
from src.taskhub.models.enums import OrganizationRole


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class UserIdentity:
    """Caller identity proven by the identity provider."""

    user_id: UUID
    email: str


@dataclass(frozen=True)
class RequestScope:
    """Read-only snapshot of the request inputs the extractor may inspect."""

    path_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path_params", _frozen(self.path_params))
        object.__setattr__(self, "query_params", _frozen(self.query_params))
        object.__setattr__(self, "body", _frozen(self.body))

    def lookup(self, location: str, name: str) -> Any:
        container = {
            "path": self.path_params,
            "query": self.query_params,
            "body": self.body,
        }[location]
        return container.get(name)


@dataclass(frozen=True)
class OrgContext:
    """What handlers receive after admission.

    Handlers must use ``organization_id`` from here rather than re-reading it
    from the request. ``organization_id`` and ``caller_role`` are None only on
    routes that resolved no organization.
    """

    caller_id: UUID
    organization_id: UUID | None = None
    caller_role: OrganizationRole | None = None
    resource_id: UUID | None = None

    @property
    def is_organization_scoped(self) -> bool:
        return self.organization_id is not None


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of one guard evaluation. Never cached across requests."""

    allowed: bool
    resolved_organization_id: UUID | None
    caller_role: OrganizationRole | None
    requirement: RoleRequirement | None
    reason: str | None = None

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "organization_id": (
                str(self.resolved_organization_id) if self.resolved_organization_id else None
            ),
            "caller_role": self.caller_role.value if self.caller_role else None,
            "requirement": self.requirement.describe() if self.requirement else None,
            "reason": self.reason,
        }
