"""Script to initialize the database."""

import asyncio

from cafe_backend.database import AsyncSessionLocal, engine
from cafe_backend.services.bootstrap_service import create_tables, initialize_database


async def init_db() -> None:
    """Create all tables and seed role counters, the admin account and menu categories."""
    await create_tables(engine)

    async with AsyncSessionLocal() as session:
        await initialize_database(session)

    await engine.dispose()
    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
