"""Password hashing + Redis session management for dashboard users."""

from __future__ import annotations

import hashlib
import hmac
import json
import re
import secrets
from typing import Optional

import structlog
from redis.asyncio import Redis

from src.config import settings
from src.errors import FieldError, ValidationError

logger = structlog.get_logger()

SESSION_PREFIX = "admin_session:"
SESSION_COOKIE = "admin_token"

# scrypt parameters; stored hashes look like "<hex digest>.<salt>"
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_DKLEN = 64

PASSWORD_RULES = [
    (re.compile(r".{8,}", re.S), "Password must be at least 8 characters long"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
]


def _scrypt(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_DKLEN,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    return f"{_scrypt(password, salt).hex()}.{salt}"


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored "<hash>.<salt>" value."""
    if "." not in stored:
        logger.warning("password_hash_malformed")
        return False

    hashed, salt = stored.split(".", 1)
    try:
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False

    return hmac.compare_digest(expected, _scrypt(password, salt))


def check_password_policy(password: str) -> None:
    """Raise ValidationError listing every unmet password rule."""
    problems = [message for pattern, message in PASSWORD_RULES if not pattern.search(password)]
    if problems:
        raise ValidationError(
            [FieldError("password", "; ".join(problems))],
            message="Password does not meet requirements",
        )


async def create_session(
    redis: Redis,
    user_id: int,
    username: str,
    is_admin: bool,
) -> str:
    """Create a dashboard session in Redis.

    Args:
        redis: Redis client
        user_id: Id of the authenticated user
        username: Username for display
        is_admin: Whether the user may manage consultations

    Returns:
        Session token (random string)
    """
    token = secrets.token_urlsafe(32)
    session_data = json.dumps({
        "user_id": user_id,
        "username": username,
        "is_admin": is_admin,
    })

    await redis.setex(
        f"{SESSION_PREFIX}{token}",
        settings.session_ttl_seconds,
        session_data,
    )

    logger.info("admin_session_created", user_id=user_id, is_admin=is_admin)

    return token


async def get_session(redis: Redis, token: Optional[str]) -> Optional[dict]:
    """Get session data from Redis.

    Returns:
        Session dict with user_id, username, is_admin or None
    """
    if not token:
        return None

    data = await redis.get(f"{SESSION_PREFIX}{token}")
    if not data:
        return None

    try:
        return json.loads(data)
    except (json.JSONDecodeError, TypeError):
        return None


async def delete_session(redis: Redis, token: str) -> None:
    """Delete a dashboard session from Redis."""
    await redis.delete(f"{SESSION_PREFIX}{token}")
