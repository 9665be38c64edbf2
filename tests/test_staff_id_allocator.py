"""Tests for per-role counters and staff identifier allocation."""

import asyncio
import os

import pytest
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from cafe_backend.core.exceptions import UnknownRoleException
from cafe_backend.core.roles import StaffRole
from cafe_backend.models import metadata
from cafe_backend.models.role_counters import role_counters
from cafe_backend.services.staff_id_service import (
    RoleCounterStore,
    StaffIdAllocator,
    format_staff_id,
)


class TestFormatStaffId:
    """Tests for identifier formatting."""

    def test_zero_padded_to_three_digits(self):
        """Small values are padded."""
        assert format_staff_id("BA", 1) == "BA001"
        assert format_staff_id("MA", 42) == "MA042"
        assert format_staff_id("CL", 999) == "CL999"

    def test_widens_past_999(self):
        """Values above 999 keep all their digits."""
        assert format_staff_id("MA", 1000) == "MA1000"
        assert format_staff_id("BK", 12345) == "BK12345"


@pytest.mark.asyncio
class TestRoleCounterStore:
    """Tests for the durable counter rows."""

    async def test_counters_seeded_at_zero(self, db_session: AsyncSession):
        """Every role has a counter starting at zero."""
        result = await db_session.execute(select(role_counters))
        counters = {row.role: row.counter for row in result}

        assert counters == {role.value: 0 for role in StaffRole}

    async def test_ensure_counters_is_idempotent(self, db_session: AsyncSession):
        """Re-seeding never resets an advanced counter."""
        await RoleCounterStore.next_value(db_session, StaffRole.CASHIER)
        await db_session.commit()

        await RoleCounterStore.ensure_counters(db_session)
        await db_session.commit()

        assert await RoleCounterStore.current_value(db_session, StaffRole.CASHIER) == 1
        assert await RoleCounterStore.current_value(db_session, StaffRole.BAKER) == 0

    async def test_next_value_increments(self, db_session: AsyncSession):
        """Each call returns the previous value plus one."""
        values = [await RoleCounterStore.next_value(db_session, "Baker") for _ in range(3)]
        await db_session.commit()

        assert values == [1, 2, 3]

    async def test_missing_counter_row(self, db_session: AsyncSession):
        """A role without a counter row is reported as unknown."""
        await db_session.execute(delete(role_counters).where(role_counters.c.role == "Cleaner"))
        await db_session.commit()

        with pytest.raises(UnknownRoleException):
            await RoleCounterStore.next_value(db_session, StaffRole.CLEANER)


@pytest.mark.asyncio
class TestStaffIdAllocator:
    """Tests for staff identifier allocation."""

    async def test_first_identifier(self, db_session: AsyncSession):
        """The first manager gets MA001."""
        staff_id = await StaffIdAllocator().allocate(db_session, StaffRole.MANAGER)
        await db_session.commit()

        assert staff_id == "MA001"

    async def test_sequential_identifiers(self, db_session: AsyncSession):
        """Allocations for one role are strictly increasing."""
        allocator = StaffIdAllocator()
        ids = [await allocator.allocate(db_session, "Barista") for _ in range(3)]
        await db_session.commit()

        assert ids == ["BA001", "BA002", "BA003"]

    async def test_roles_are_independent(self, db_session: AsyncSession):
        """Each role has its own sequence."""
        allocator = StaffIdAllocator()
        await allocator.allocate(db_session, "Barista")
        await allocator.allocate(db_session, "Barista")

        assert await allocator.allocate(db_session, "Cashier") == "CA001"
        assert await allocator.allocate(db_session, "Barista") == "BA003"

    async def test_unknown_role(self, db_session: AsyncSession):
        """Unknown roles are rejected without touching any counter."""
        with pytest.raises(UnknownRoleException):
            await StaffIdAllocator().allocate(db_session, "Sommelier")

        for role in StaffRole:
            assert await RoleCounterStore.current_value(db_session, role) == 0

    async def test_rollback_releases_nothing(self, db_session: AsyncSession):
        """An allocation in a rolled-back transaction leaves the counter unchanged."""
        allocator = StaffIdAllocator()
        assert await allocator.allocate(db_session, "Manager") == "MA001"
        await db_session.commit()

        await allocator.allocate(db_session, "Manager")
        await db_session.rollback()

        assert await RoleCounterStore.current_value(db_session, "Manager") == 1
        assert await allocator.allocate(db_session, "Manager") == "MA002"

    async def test_widens_past_999(self, db_session: AsyncSession):
        """The thousandth manager gets a four-digit identifier."""
        await db_session.execute(
            update(role_counters).where(role_counters.c.role == "Manager").values(counter=999)
        )
        await db_session.commit()

        assert await StaffIdAllocator().allocate(db_session, "Manager") == "MA1000"

    async def test_concurrent_allocations_are_unique(
        self, session_factory: async_sessionmaker[AsyncSession]
    ):
        """
        Concurrent allocations for one role produce exactly 1..N.

        The in-memory engine shares a single connection, so the statements are
        interleaved but never run in parallel. The PostgreSQL variant below
        covers real row-level contention.
        """
        allocator = StaffIdAllocator()

        async def allocate_one() -> str:
            async with session_factory() as session:
                staff_id = await allocator.allocate(session, StaffRole.BARISTA)
                await session.commit()
                return staff_id

        ids = await asyncio.gather(*(allocate_one() for _ in range(20)))

        assert len(set(ids)) == 20
        assert sorted(ids) == [f"BA{n:03d}" for n in range(1, 21)]

        async with session_factory() as session:
            assert await RoleCounterStore.current_value(session, StaffRole.BARISTA) == 20


POSTGRES_URL = os.environ.get("TEST_DATABASE_URL", "")


@pytest.mark.postgres
@pytest.mark.asyncio
@pytest.mark.skipif(
    not POSTGRES_URL.startswith("postgresql"),
    reason="TEST_DATABASE_URL does not point at PostgreSQL",
)
class TestStaffIdAllocatorPostgres:
    """Allocation under contention on separate PostgreSQL connections."""

    async def test_parallel_allocations_are_unique(self):
        """Twenty sessions on twenty connections allocate exactly 1..20."""
        pg_engine = create_async_engine(POSTGRES_URL, poolclass=NullPool)
        async with pg_engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
            await conn.run_sync(metadata.create_all)

        factory = async_sessionmaker(pg_engine, class_=AsyncSession, expire_on_commit=False)
        async with factory() as session:
            await RoleCounterStore.ensure_counters(session)
            await session.commit()

        allocator = StaffIdAllocator()

        async def allocate_one() -> str:
            async with factory() as session:
                staff_id = await allocator.allocate(session, StaffRole.BARISTA)
                # Hold the row lock briefly so other transactions queue behind it
                await asyncio.sleep(0.01)
                await session.commit()
                return staff_id

        try:
            ids = await asyncio.gather(*(allocate_one() for _ in range(20)))

            assert sorted(ids) == [f"BA{n:03d}" for n in range(1, 21)]
            async with factory() as session:
                assert await RoleCounterStore.current_value(session, StaffRole.BARISTA) == 20
        finally:
            async with pg_engine.begin() as conn:
                await conn.run_sync(metadata.drop_all)
            await pg_engine.dispose()
