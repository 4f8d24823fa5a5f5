"""User repository — dashboard accounts."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import FieldError, ValidationError
from src.models.user import User
from src.repositories.base import translate_db_error


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int) -> Optional[User]:
        try:
            return await self.db.get(User, user_id)
        except (SQLAlchemyError, OSError) as exc:
            raise translate_db_error(exc) from exc

    async def get_by_username(self, username: str) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.username == username))
        except (SQLAlchemyError, OSError) as exc:
            raise translate_db_error(exc) from exc
        return result.scalar_one_or_none()

    async def create(self, username: str, password_hash: str, is_admin: bool = False) -> User:
        user = User(username=username, password_hash=password_hash, is_admin=is_admin)
        self.db.add(user)
        try:
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as exc:
            await self.db.rollback()
            raise ValidationError(
                [FieldError("username", "Username already exists")]
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            await self.db.rollback()
            raise translate_db_error(exc) from exc
        return user
