"""FastAPI dependencies for dashboard authentication."""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import Cookie, Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from src.admin.auth import get_session
from src.database import get_db
from src.errors import AuthenticationError, AuthorizationError
from src.models.user import User
from src.redis_client import get_redis
from src.repositories.user import UserRepository

logger = structlog.get_logger()


async def get_current_user(
    admin_token: Optional[str] = Cookie(None),
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
) -> Optional[User]:
    """Get the currently authenticated user from the session cookie.

    Returns None if not authenticated.
    """
    if not admin_token:
        return None

    session = await get_session(redis, admin_token)
    if not session:
        return None

    user_id = session.get("user_id")
    if not user_id:
        return None

    return await UserRepository(db).get(int(user_id))


async def require_user(
    user: Optional[User] = Depends(get_current_user),
) -> User:
    if user is None:
        raise AuthenticationError()
    return user


async def require_admin(
    user: User = Depends(require_user),
) -> User:
    """Dependency for admin-only routes. Runs before any store access."""
    if not user.is_admin:
        logger.warning("admin_access_denied", user_id=user.id)
        raise AuthorizationError()
    return user
