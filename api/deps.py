"""Shared FastAPI dependencies."""

from fastapi import Depends

from api.middleware import get_current_user_id
from core.errors import Unauthorized
from verticals.accounts.models.db_models import User
from verticals.accounts.repository import UserRepository, get_user_repository


async def get_current_user(
    repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Load the user behind the request's verified token.

    Raises Unauthorized when the request carries no valid token or the
    token's user no longer exists.
    """
    user_id = get_current_user_id()
    if user_id is None:
        raise Unauthorized()

    user = await repo.get(user_id)
    if user is None:
        raise Unauthorized("No user found with this token")
    return user
