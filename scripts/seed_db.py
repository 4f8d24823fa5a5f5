"""Create tables and the initial admin account."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from src.admin.auth import check_password_policy, hash_password
from src.config import settings
from src.models import Base, User


def check_admin_password(password: str) -> None:
    """Refuse to seed an admin without an explicit, policy-compliant password."""
    if not password:
        raise RuntimeError("ADMIN_PASSWORD must be set before seeding the admin user")
    check_password_policy(password)


async def seed():
    """Create the schema and the admin user if it does not exist yet."""
    check_admin_password(settings.admin_password)

    engine = create_async_engine(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession)

    async with session_factory() as session:
        result = await session.execute(
            select(User).where(User.username == settings.admin_username)
        )
        admin = result.scalar_one_or_none()

        if admin is None:
            session.add(User(
                username=settings.admin_username,
                password_hash=hash_password(settings.admin_password),
                is_admin=True,
            ))
            print(f"  + Admin user: {settings.admin_username}")
        elif not admin.is_admin:
            admin.is_admin = True
            print(f"  ~ Granted admin to: {settings.admin_username}")
        else:
            print(f"  = Admin user exists: {settings.admin_username}")

        await session.commit()

    await engine.dispose()
    print("\nSeed completed!")


if __name__ == "__main__":
    asyncio.run(seed())
