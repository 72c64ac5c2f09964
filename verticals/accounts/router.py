"""Accounts API router — register, login, current user, logout.

Tokens are returned in the body and also set as an httpOnly cookie, so both
bearer-header and cookie clients work.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.exc import IntegrityError

from api.deps import get_current_user
from core.config import get_settings
from core.errors import Unauthorized, ValidationFailed
from core.security import create_access_token, hash_password, verify_password
from verticals.accounts.models.db_models import User
from verticals.accounts.repository import UserRepository, get_user_repository
from verticals.accounts.rules import validate_login, validate_registration

logger = logging.getLogger(__name__)

router = APIRouter()


def _email_taken() -> ValidationFailed:
    message = "User already exists with this email"
    return ValidationFailed([("email", message)], message=message)


def _token_response(user: User, response: Response) -> dict[str, Any]:
    auth = get_settings().auth
    token = create_access_token(str(user.id), auth)
    response.set_cookie(
        auth.cookie_name,
        token,
        max_age=auth.token_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=auth.cookie_secure,
        samesite="strict",
    )
    return {"success": True, "token": token, "user": user.to_dict()}


@router.post("/register", status_code=201)
async def register(
    response: Response,
    payload: dict[str, Any] = Body(...),
    repo: UserRepository = Depends(get_user_repository),
):
    """Create an account and sign the caller in."""
    data = validate_registration(payload)
    if await repo.get_by_email(data.email) is not None:
        raise _email_taken()

    try:
        user = await repo.create(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
        )
    except IntegrityError as exc:
        # A concurrent registration claimed the email after the lookup.
        logger.warning("Duplicate registration for %s: %s", data.email, exc.orig)
        raise _email_taken() from exc
    logger.info("Registered user %s", user.id)
    return _token_response(user, response)


@router.post("/login")
async def login(
    response: Response,
    payload: dict[str, Any] = Body(...),
    repo: UserRepository = Depends(get_user_repository),
):
    """Exchange email + password for a token."""
    data = validate_login(payload)
    user = await repo.get_by_email(data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    return _token_response(user, response)


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return {"success": True, "user": user.to_dict()}


@router.post("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    """Clear the token cookie."""
    response.delete_cookie(get_settings().auth.cookie_name)
    return {"success": True, "message": "Logged out successfully"}
