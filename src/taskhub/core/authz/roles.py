"""Role hierarchy: OWNER > ADMIN > VIEWER.

The rank table is the whole enforcement primitive. Route requirements rely on
these numbers, so reordering them changes every route's meaning.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from src.taskhub.models.enums import OrganizationRole

ROLE_RANKS: Final[Mapping[OrganizationRole, int]] = MappingProxyType(
    {
        OrganizationRole.OWNER: 3,
        OrganizationRole.ADMIN: 2,
        OrganizationRole.VIEWER: 1,
    }
)


def rank(role: OrganizationRole) -> int:
    return ROLE_RANKS[role]


def satisfies(caller_role: OrganizationRole, required_role: OrganizationRole) -> bool:
    """Whether ``caller_role`` meets a minimum of ``required_role`` (inheritance, not equality)."""
    return rank(caller_role) >= rank(required_role)


def parse_role(value: str | OrganizationRole | None) -> OrganizationRole | None:
    """Convert a stored role value, returning None for anything unrecognised."""
    if value is None:
        return None
    try:
        return OrganizationRole(value)
    except ValueError:
        return None
