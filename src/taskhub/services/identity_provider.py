"""Bearer-token identity provider."""

from uuid import UUID

from src.taskhub.core.authz import Unauthenticated, UserIdentity
from src.taskhub.core.security import ACCESS_TOKEN_TYPE, decode_token
from src.taskhub.repositories import UserRepository

BEARER_PREFIX = "Bearer "


class TokenIdentityProvider:
    """Turns an Authorization header into a verified UserIdentity.

    Raises Unauthenticated for anything short of a valid access token that
    names an existing, active user.
    """

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def verify(self, authorization: str | None) -> UserIdentity:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise Unauthenticated("missing or malformed authorization header")

        payload = decode_token(authorization[len(BEARER_PREFIX) :])
        if payload is None:
            raise Unauthenticated("invalid or expired token")

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise Unauthenticated("invalid token type")

        subject = payload.get("sub")
        if not subject:
            raise Unauthenticated("token has no subject")

        try:
            user_id = UUID(subject)
        except ValueError as e:
            raise Unauthenticated("token subject is not a user id") from e

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise Unauthenticated("user not found or inactive")

        return UserIdentity(user_id=user.id, email=user.email)
