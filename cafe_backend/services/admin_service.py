"""Administrator account service."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cafe_backend.config import settings
from cafe_backend.core.exceptions import ConflictException
from cafe_backend.core.security import get_password_hash
from cafe_backend.models.admin_users import admin_users

logger = structlog.get_logger(__name__)

_PUBLIC_COLUMNS = [column for column in admin_users.c if column.name != "password_hash"]


class AdminService:
    """Service for administrator accounts."""

    @staticmethod
    async def get_admin_by_id(db: AsyncSession, admin_id: UUID) -> dict | None:
        """Get administrator by internal ID."""
        query = select(*_PUBLIC_COLUMNS).where(admin_users.c.id == admin_id)
        result = await db.execute(query)
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def get_admin_credentials(db: AsyncSession, username: str) -> dict | None:
        """Get the full administrator row, password hash included."""
        query = select(admin_users).where(admin_users.c.username == username)
        result = await db.execute(query)
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def create_admin(
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        first_name: str = "Admin",
        last_name: str = "User",
    ) -> dict:
        """
        Create an administrator account.

        Raises:
            ConflictException: If the username or email is already in use
        """
        existing = await db.execute(
            select(admin_users.c.id).where(
                or_(admin_users.c.username == username, admin_users.c.email == email)
            )
        )
        if existing.first():
            raise ConflictException("Administrator username or email already exists")

        password_hash = await run_in_threadpool(get_password_hash, password)
        query = (
            admin_users.insert()
            .values(
                username=username,
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                created_at=datetime.now(UTC),
            )
            .returning(*_PUBLIC_COLUMNS)
        )

        try:
            result = await db.execute(query)
            admin = result.mappings().first()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("Administrator username or email already exists") from e

        if not admin:
            raise ValueError("Failed to create administrator")

        logger.info("admin_created", username=username)
        return dict(admin)

    @staticmethod
    async def count_admins(db: AsyncSession) -> int:
        """Count administrator accounts."""
        result = await db.execute(select(func.count()).select_from(admin_users))
        return result.scalar_one()

    @classmethod
    async def ensure_bootstrap_admin(cls, db: AsyncSession) -> dict | None:
        """
        Create the configured bootstrap administrator when no administrator exists.

        Any existing administrator, whatever its username, suppresses the seed.

        Returns:
            The created administrator, or None if one already existed
        """
        if await cls.count_admins(db) > 0:
            return None

        admin = await cls.create_admin(
            db,
            username=settings.admin_username,
            email=settings.admin_email,
            password=settings.admin_password,
        )
        logger.info("bootstrap_admin_created", username=admin["username"])
        return admin

    @staticmethod
    async def record_login(db: AsyncSession, admin_id: UUID) -> None:
        """Update administrator's last login timestamp."""
        query = (
            update(admin_users)
            .where(admin_users.c.id == admin_id)
            .values(last_login=datetime.now(UTC))
        )
        await db.execute(query)
        await db.commit()
