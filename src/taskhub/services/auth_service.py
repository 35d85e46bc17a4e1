"""Authentication service - registration and login.

Tokens carry identity only. Organization roles are resolved per request.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskhub.core.logging import get_logger
from src.taskhub.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    hash_password,
    verify_password,
)
from src.taskhub.models import User
from src.taskhub.repositories import UserRepository

logger = get_logger(__name__)


class EmailAlreadyRegisteredError(ValueError):
    pass


class AuthService:
    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> tuple[User, str]:
        """Create a user and return (user, access_token).

        Raises EmailAlreadyRegisteredError if the email is taken.
        """
        email = email.lower().strip()
        if await self.user_repo.exists_by_email(email):
            raise EmailAlreadyRegisteredError("Email already registered")

        user = User(
            email=email,
            hashed_password=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
        self.user_repo.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            # Concurrent registration with the same email
            await self.session.rollback()
            raise EmailAlreadyRegisteredError("Email already registered") from e
        await self.session.refresh(user)

        logger.info("User registered", user_id=str(user.id))
        return user, create_access_token(user.id, user.email)

    async def authenticate(self, email: str, password: str) -> tuple[User, str] | None:
        """Verify credentials and return (user, access_token), or None."""
        user = await self.user_repo.get_by_email(email.strip())

        # Always verify so unknown emails take as long as wrong passwords
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid or not user.is_active:
            logger.info("Login failed", reason="invalid_credentials")
            return None

        logger.info("User logged in", user_id=str(user.id))
        return user, create_access_token(user.id, user.email)
