"""Per-request audit metadata held in a contextvar.

The middleware opens the context with transport details. The authorization
guard later adds the caller and the organization it resolved, so audit
entries written anywhere in the request can default to them.
"""

from contextvars import ContextVar
from dataclasses import dataclass, replace
from uuid import UUID

_audit_context: ContextVar["AuditContext | None"] = ContextVar("audit_context", default=None)

MAX_USER_AGENT_LENGTH = 500


@dataclass(frozen=True)
class AuditContext:
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    actor_id: UUID | None = None
    organization_id: UUID | None = None


def open_audit_context(
    ip_address: str | None = None,
    user_agent: str | None = None,
    request_id: str | None = None,
) -> None:
    if user_agent and len(user_agent) > MAX_USER_AGENT_LENGTH:
        user_agent = user_agent[:MAX_USER_AGENT_LENGTH]
    _audit_context.set(
        AuditContext(ip_address=ip_address, user_agent=user_agent, request_id=request_id)
    )


def bind_audit_subject(actor_id: UUID, organization_id: UUID | None = None) -> None:
    """Record who is acting, and in which organization, for this request.

    An organization bound earlier is kept when ``organization_id`` is None.
    """
    ctx = _audit_context.get() or AuditContext()
    _audit_context.set(
        replace(
            ctx,
            actor_id=actor_id,
            organization_id=organization_id or ctx.organization_id,
        )
    )


def get_audit_context() -> AuditContext | None:
    return _audit_context.get()


def clear_audit_context() -> None:
    _audit_context.set(None)


def get_client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """First X-Forwarded-For hop, else the socket peer."""
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return client_host
