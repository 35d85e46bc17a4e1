"""Authentication dependencies."""

from typing import Annotated

from fastapi import Depends

from src.taskhub.api.dependencies.authz import Authenticated
from src.taskhub.api.dependencies.repositories import UserRepo
from src.taskhub.core.authz import Unauthenticated
from src.taskhub.models import User


async def get_current_user(context: Authenticated, user_repo: UserRepo) -> User:
    """Return the user behind a verified access token."""
    user = await user_repo.get_by_id(context.caller_id)
    if user is None:
        raise Unauthenticated("user disappeared after verification")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
