"""Per-route authorization declarations.

A ``RoutePolicy`` is attached to each route when it is registered and read by
the single generic guard. It says where the target organization comes from and
which roles may proceed.
"""

from dataclasses import dataclass
from typing import Literal

from src.taskhub.core.authz.requirements import RoleRequirement
from src.taskhub.models.audit import AuditAction

RequestLocation = Literal["path", "query", "body"]


@dataclass(frozen=True)
class FromRequest:
    """Organization id supplied explicitly by the client."""

    location: RequestLocation
    name: str
    # Absent value means "no organization check" instead of a 400
    optional: bool = False


@dataclass(frozen=True)
class FromResource:
    """Organization id taken from the stored resource named by a path param."""

    resource_type: str
    param: str


OrgSource = FromRequest | FromResource


def from_path(name: str) -> FromRequest:
    return FromRequest("path", name)


def from_query(name: str) -> FromRequest:
    return FromRequest("query", name)


def from_body(name: str, *, optional: bool = False) -> FromRequest:
    return FromRequest("body", name, optional=optional)


def from_resource(resource_type: str, param: str) -> FromResource:
    return FromResource(resource_type, param)


@dataclass(frozen=True)
class RoutePolicy:
    """Authorization declaration for one route.

    Attributes:
        requirement: Role requirement, or None for authenticated-only routes.
        source: Where the target organization is read from.
        conceal_membership: Report non-members as 404 instead of 403.
        audit_action: Mutating routes record denials under this action.
        resource_type: Resource type used for audit entries.
    """

    requirement: RoleRequirement | None = None
    source: OrgSource | None = None
    conceal_membership: bool = False
    audit_action: AuditAction | None = None
    resource_type: str | None = None

    def __post_init__(self) -> None:
        if self.requirement is not None and self.source is None:
            raise ValueError("A role requirement needs an organization source")
