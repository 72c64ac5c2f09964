"""Credential hashing and signed access tokens.

The task core never parses credentials itself: the HTTP layer resolves a
bearer token to a user id here and hands the loaded user downstream.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from core.config import AuthConfig, get_settings
from core.errors import Unauthorized


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def hash_password(password: str, rounds: int | None = None) -> str:
    rounds = rounds or get_settings().auth.bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def create_access_token(
    subject: str,
    config: AuthConfig | None = None,
    now: datetime | None = None,
) -> str:
    """Sign a token whose `sub` claim is the user id."""
    config = config or get_settings().auth
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "iat": issued,
        "exp": issued + timedelta(days=config.token_ttl_days),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: AuthConfig | None = None) -> dict[str, Any]:
    """Verify signature and expiry.

    Raises Unauthorized for any invalid, expired or malformed token.
    """
    config = config or get_settings().auth
    try:
        claims = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise Unauthorized() from exc
    return claims
