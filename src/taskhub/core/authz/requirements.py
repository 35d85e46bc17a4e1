"""Route-level role requirements.

A route declares exactly one requirement at registration time:

* ``Minimum(role)`` - admitted when the caller's rank is at least ``role``'s rank.
* ``ExactSet(roles)`` - admitted only when the caller's role is in ``roles``.

No requirement at all means "authenticated only" and is reserved for
organization-agnostic endpoints.
"""

from dataclasses import dataclass

from src.taskhub.core.authz.roles import satisfies
from src.taskhub.models.enums import OrganizationRole


@dataclass(frozen=True)
class Minimum:
    role: OrganizationRole

    def is_satisfied_by(self, caller_role: OrganizationRole) -> bool:
        return satisfies(caller_role, self.role)

    def describe(self) -> str:
        return f"minimum {self.role.value}"


@dataclass(frozen=True)
class ExactSet:
    roles: frozenset[OrganizationRole]

    def __post_init__(self) -> None:
        if not self.roles:
            raise ValueError("ExactSet requires at least one role")
        # Accept any iterable, store a frozenset so instances stay hashable
        object.__setattr__(self, "roles", frozenset(self.roles))

    @classmethod
    def of(cls, *roles: OrganizationRole) -> "ExactSet":
        return cls(frozenset(roles))

    def is_satisfied_by(self, caller_role: OrganizationRole) -> bool:
        return caller_role in self.roles

    def describe(self) -> str:
        return "one of " + ", ".join(sorted(role.value for role in self.roles))


RoleRequirement = Minimum | ExactSet
