"""Field-level authorization for update payloads.

Runs after the route guard has admitted the caller. Some roles may call an
update route but only touch a subset of fields; the whole payload is refused
if any other field is present.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.taskhub.core.authz.errors import FieldPolicyViolation
from src.taskhub.models.enums import OrganizationRole


@dataclass(frozen=True)
class FieldLevelPolicy:
    """Allowed payload fields per restricted role.

    Roles absent from ``allowed_fields`` are unrestricted. ``system_fields`` are
    injected server side and never count as caller input.
    """

    allowed_fields: Mapping[OrganizationRole, frozenset[str]]
    system_fields: frozenset[str] = field(default_factory=frozenset)

    def submitted_fields(self, payload: Mapping[str, Any]) -> frozenset[str]:
        """Field names the caller actually sent, minus server-injected ones.

        ``payload`` should hold only explicitly provided keys (pydantic
        ``exclude_unset``). An explicit null is still a submitted field.
        """
        return frozenset(payload) - self.system_fields

    def disallowed_fields(
        self, role: OrganizationRole, payload: Mapping[str, Any]
    ) -> frozenset[str]:
        allowed = self.allowed_fields.get(role)
        if allowed is None:
            return frozenset()
        return self.submitted_fields(payload) - allowed

    def enforce(self, role: OrganizationRole, payload: Mapping[str, Any]) -> None:
        disallowed = self.disallowed_fields(role, payload)
        if disallowed:
            raise FieldPolicyViolation(
                disallowed,
                reason=f"{role.value} may not modify: {', '.join(sorted(disallowed))}",
            )


TASK_UPDATE_POLICY = FieldLevelPolicy(
    allowed_fields={OrganizationRole.VIEWER: frozenset({"status"})},
    system_fields=frozenset({"organization_id"}),
)
