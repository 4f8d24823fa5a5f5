"""Auth API — dashboard login, logout, registration."""

from typing import Optional

import structlog
from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from src.admin.auth import (
    SESSION_COOKIE,
    check_password_policy,
    create_session,
    delete_session,
    hash_password,
    verify_password,
)
from src.admin.dependencies import require_user
from src.config import settings
from src.database import get_db
from src.errors import AuthenticationError, FieldError, ValidationError
from src.models.user import User
from src.redis_client import get_redis
from src.repositories.user import UserRepository
from src.schemas.user import LoginRequest, RegisterRequest, UserResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_body(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True)


@router.post("/login")
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """Verify credentials, open a session and set the session cookie."""
    user = await UserRepository(db).get_by_username(data.username)
    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning("admin_login_failed", username=data.username)
        raise AuthenticationError("Invalid username or password")

    token = await create_session(
        redis=redis,
        user_id=user.id,
        username=user.username,
        is_admin=user.is_admin,
    )

    response = JSONResponse(_user_body(user))
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.admin_cookie_secure,
        samesite="lax",
        max_age=settings.session_ttl_seconds,
    )

    logger.info("admin_login_success", user_id=user.id, is_admin=user.is_admin)
    return response


@router.post("/logout")
async def logout(
    admin_token: Optional[str] = Cookie(None),
    redis: Redis = Depends(get_redis),
):
    """Clear session and cookie."""
    if admin_token:
        await delete_session(redis, admin_token)

    response = JSONResponse({"success": True})
    response.delete_cookie(SESSION_COOKIE)
    return response


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Create a regular (non-admin) account."""
    check_password_policy(data.password)

    users = UserRepository(db)
    if await users.get_by_username(data.username) is not None:
        raise ValidationError([FieldError("username", "Username already exists")])

    user = await users.create(data.username, hash_password(data.password), is_admin=False)
    logger.info("user_registered", user_id=user.id)
    return _user_body(user)


@router.get("/user")
async def current_user(user: User = Depends(require_user)) -> dict:
    return _user_body(user)
