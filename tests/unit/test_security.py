"""Tests for token handling, password hashing and the identity provider."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from jose import jwt

from src.taskhub.core.authz import Unauthenticated
from src.taskhub.core.config import get_settings
from src.taskhub.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.taskhub.services.identity_provider import TokenIdentityProvider
from tests.factories import UserFactory

pytestmark = pytest.mark.unit


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-Passphrase")
        assert hashed != "s3cret-Passphrase"
        assert verify_password("s3cret-Passphrase", hashed)
        assert not verify_password("wrong", hashed)

    def test_invalid_hash_is_false(self):
        assert not verify_password("anything", "not-an-argon2-hash")


class TestTokens:
    def test_access_token_carries_identity_only(self, user_id):
        payload = decode_token(create_access_token(user_id, "a@example.com"))

        assert payload["sub"] == str(user_id)
        assert payload["email"] == "a@example.com"
        assert payload["type"] == ACCESS_TOKEN_TYPE
        assert "role" not in payload
        assert "organization_id" not in payload

    def test_expired_token_is_rejected(self, user_id):
        token = create_access_token(user_id, "a@example.com", expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_foreign_signature_is_rejected(self, user_id):
        token = jwt.encode({"sub": str(user_id)}, "x" * 40, algorithm="HS256")
        assert decode_token(token) is None

    def test_invitation_token_shape(self):
        token = generate_invitation_token()
        assert len(token) == 64
        int(token, 16)

    def test_hash_token_is_sha256_hex(self):
        assert hash_token("abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )


@pytest.fixture
def user_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def provider(user_repo) -> TokenIdentityProvider:
    return TokenIdentityProvider(user_repo)


class TestTokenIdentityProvider:
    async def test_valid_token_yields_identity(self, provider, user_repo):
        user = UserFactory.build()
        user_repo.get_by_id.return_value = user

        identity = await provider.verify(f"Bearer {create_access_token(user.id, user.email)}")

        assert identity.user_id == user.id
        assert identity.email == user.email

    @pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer", "Bearer not-a-jwt"])
    async def test_malformed_credentials(self, provider, header):
        with pytest.raises(Unauthenticated):
            await provider.verify(header)

    async def test_wrong_token_type(self, provider, user_id):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(user_id), "type": "refresh"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthenticated, match="token type"):
            await provider.verify(f"Bearer {token}")

    async def test_unknown_user(self, provider):
        with pytest.raises(Unauthenticated, match="not found"):
            await provider.verify(f"Bearer {create_access_token(uuid4(), 'x@example.com')}")

    async def test_inactive_user(self, provider, user_repo):
        user = UserFactory.inactive()
        user_repo.get_by_id.return_value = user
        with pytest.raises(Unauthenticated):
            await provider.verify(f"Bearer {create_access_token(user.id, user.email)}")
