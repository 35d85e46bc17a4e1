"""Tests for authorization error rendering."""

import json

import pytest

from src.taskhub.core.authz import (
    AuthorizationUnavailable,
    FieldPolicyViolation,
    InsufficientRole,
    NotAMember,
    ResourceNotFound,
    Unauthenticated,
)
from src.taskhub.core.config import get_settings
from src.taskhub.core.exceptions import authorization_error_response

pytestmark = pytest.mark.unit


def _body(response) -> dict:
    return json.loads(response.body)


@pytest.fixture
def expose_reasons(monkeypatch):
    monkeypatch.setenv("EXPOSE_DENIAL_REASONS", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.parametrize(
    ("error", "status_code", "detail"),
    [
        (Unauthenticated("x"), 401, "Not authenticated"),
        (NotAMember("x"), 403, "Insufficient permissions for this organization"),
        (InsufficientRole("x"), 403, "Insufficient permissions for this organization"),
        (FieldPolicyViolation({"title"}), 403, "Not permitted to modify one or more fields"),
        (ResourceNotFound("task", "x"), 404, "Task not found"),
        (AuthorizationUnavailable("x"), 503, "Authorization temporarily unavailable"),
    ],
)
def test_status_and_public_detail(error, status_code, detail):
    response = authorization_error_response(error)

    assert response.status_code == status_code
    body = _body(response)
    assert body["detail"] == detail
    assert "request_id" in body


def test_reason_hidden_by_default():
    body = _body(authorization_error_response(InsufficientRole("role VIEWER does not satisfy")))
    assert "reason" not in body


def test_reason_exposed_when_enabled(expose_reasons):
    body = _body(authorization_error_response(InsufficientRole("role VIEWER does not satisfy")))
    assert body["reason"] == "role VIEWER does not satisfy"


def test_reason_never_exposed_in_production(expose_reasons, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    get_settings.cache_clear()

    body = _body(authorization_error_response(NotAMember("no membership")))

    assert "reason" not in body


def test_unauthenticated_sets_bearer_challenge():
    response = authorization_error_response(Unauthenticated("missing header"))
    assert response.headers["www-authenticate"] == "Bearer"
