"""Route-level authorization dependencies.

Each route registers its ``RoutePolicy`` through ``guard_route``; the single
``AuthorizationGuard`` evaluates it and hands the handler an ``OrgContext``.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import Depends, Header, Request

from src.taskhub.api.dependencies.services import AuthorizationGuardDep
from src.taskhub.core.authz import OrgContext, RequestScope, RoutePolicy

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

# Authenticated only, no organization check
AUTHENTICATED_ONLY = RoutePolicy()


async def _read_json_body(request: Request) -> dict[str, Any]:
    if request.method not in _BODY_METHODS:
        return {}
    if "json" not in request.headers.get("content-type", ""):
        return {}
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        # Request validation reports the malformed body
        return {}
    return body if isinstance(body, dict) else {}


async def build_request_scope(request: Request) -> RequestScope:
    return RequestScope(
        path_params=request.path_params,
        query_params=request.query_params,
        body=await _read_json_body(request),
    )


def guard_route(policy: RoutePolicy) -> Callable[..., Awaitable[OrgContext]]:
    """Build a dependency that admits the request under ``policy``."""

    async def authorize(
        request: Request,
        guard: AuthorizationGuardDep,
        authorization: Annotated[str | None, Header()] = None,
    ) -> OrgContext:
        scope = await build_request_scope(request)
        return await guard.authorize(authorization, scope, policy)

    return authorize


def authorized(policy: RoutePolicy) -> Any:
    """``Annotated`` alias for a handler parameter guarded by ``policy``."""
    return Annotated[OrgContext, Depends(guard_route(policy))]


Authenticated = authorized(AUTHENTICATED_ONLY)
