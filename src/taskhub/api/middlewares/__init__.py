"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.taskhub.core.config import Settings

from .audit_context import audit_context_middleware
from .logging_context import logging_context_middleware

__all__ = [
    "setup_middlewares",
    "audit_context_middleware",
    "logging_context_middleware",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Configure all application middlewares.

    Starlette wraps in reverse registration order: the last one added is the
    outermost and runs first.
    """
    # Audit context - IP, user agent and request id for audit entries
    @app.middleware("http")
    async def _audit_context(request, call_next):  # type: ignore[no-untyped-def]
        return await audit_context_middleware(request, call_next)

    # Logging context - binds request_id to structlog context
    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    # CORS - handle cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Correlation ID - generates/propagates X-Request-ID; must wrap everything above
    app.add_middleware(CorrelationIdMiddleware)
