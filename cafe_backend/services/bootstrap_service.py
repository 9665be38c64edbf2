"""Idempotent seeding of reference data."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_backend.models.base import metadata
from cafe_backend.services.admin_service import AdminService
from cafe_backend.services.menu_service import MenuService
from cafe_backend.services.staff_id_service import RoleCounterStore

logger = structlog.get_logger(__name__)


async def create_tables(engine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def initialize_database(db: AsyncSession) -> None:
    """
    Seed role counters, default menu categories and the bootstrap administrator.

    The administrator is only created while the admin table is empty.

    Safe to run on every start-up: existing rows are never overwritten.
    """
    await RoleCounterStore.ensure_counters(db)
    await MenuService.ensure_default_categories(db)
    await db.commit()

    await AdminService.ensure_bootstrap_admin(db)

    logger.info("database_initialized")
